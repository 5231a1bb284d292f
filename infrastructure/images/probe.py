"""
Server-side image surface.

Loads each variant with httpx and decodes it with Pillow to learn its size,
so the variant fallback can be exercised without a browser.
"""

import asyncio
import io
import logging
from typing import Dict, Optional, Set

import httpx
from PIL import Image, UnidentifiedImageError

from core.ports import ErrorCallback, ImageSurface, LoadCallback

logger = logging.getLogger(__name__)


class HttpImageSurface(ImageSurface):
    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)
        self._pending: Set[asyncio.Task] = set()
        self.placeholders: Dict[str, str] = {}

    async def close(self) -> None:
        """Close HTTP client"""
        await self._client.aclose()

    def begin_load(self, card_id: str, url: str, on_load: LoadCallback, on_error: ErrorCallback) -> None:
        # requiere un event loop corriendo
        task = asyncio.get_running_loop().create_task(self._probe(card_id, url, on_load, on_error))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def show_placeholder(self, card_id: str, url: str) -> None:
        self.placeholders[card_id] = url

    async def _probe(self, card_id: str, url: str, on_load: LoadCallback, on_error: ErrorCallback) -> None:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            with Image.open(io.BytesIO(response.content)) as img:
                width, height = img.size
        except (httpx.HTTPError, UnidentifiedImageError, OSError) as e:
            logger.debug(f"Card {card_id}: {url} no cargó: {e}")
            on_error()
            return
        on_load(width, height)

    async def drain(self) -> None:
        """Espera todos los intentos, incluidos los que disparan los errores."""
        while True:
            pending = [t for t in self._pending if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending)
