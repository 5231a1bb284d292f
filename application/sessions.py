"""Render sessions: one card grid per client"""

import logging
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from core.exceptions import CardNotFoundError
from .carousel import SESSION_SEPARATOR
from .rendering import CardRenderer

logger = logging.getLogger(__name__)


class RenderSessionManager:
    """
    Keeps one CardRenderer (and its carousel arena) per client session.

    A client re-rendering its grid only discards its own cards. The least
    recently used session is dropped once ``max_sessions`` is exceeded.
    """

    def __init__(self, renderer_factory: Callable[[str], CardRenderer], max_sessions: int = 256):
        self.renderer_factory = renderer_factory
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, CardRenderer]" = OrderedDict()

    def get_or_create(self, session_id: Optional[str] = None) -> Tuple[str, CardRenderer]:
        """Get existing session or create new one"""
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        session_id = uuid.uuid4().hex
        renderer = self.renderer_factory(session_id)
        self._sessions[session_id] = renderer
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Sesión de render descartada: {evicted}")
        return session_id, renderer

    def renderer_for_card(self, card_id: str) -> CardRenderer:
        session_id, sep, _ = card_id.partition(SESSION_SEPARATOR)
        renderer = self._sessions.get(session_id) if sep else None
        if renderer is None:
            raise CardNotFoundError(f"Tarjeta no encontrada: {card_id}", {"card_id": card_id})
        self._sessions.move_to_end(session_id)
        return renderer

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
