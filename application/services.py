import logging
from typing import List, Optional
from core.entities import CardView, RenderedGrid
from .sessions import RenderSessionManager
from .store import ProductStore
from .use_cases import FilterCatalogUseCase, LoadCatalogUseCase

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, load_use_case: LoadCatalogUseCase, filter_use_case: FilterCatalogUseCase,
                 sessions: RenderSessionManager, store: ProductStore):
        self.load_use_case = load_use_case
        self.filter_use_case = filter_use_case
        self.sessions = sessions
        self.store = store

    @property
    def loaded(self) -> bool:
        return self.store.loaded

    async def load(self) -> None:
        try:
            await self.load_use_case.execute()
        except Exception as e:
            logger.error(f"Error cargando productos: {e}")
            raise

    def render(self, query: Optional[str] = "", category: Optional[str] = None,
               session_id: Optional[str] = None) -> RenderedGrid:
        # solo se reemplazan las tarjetas de la sesión que pide el render
        session_id, renderer = self.sessions.get_or_create(session_id)
        products = self.filter_use_case.execute(query, category)
        return RenderedGrid(session_id, tuple(renderer.render(products)))

    def categories(self) -> List[str]:
        return self.store.categories

    def card(self, card_id: str) -> CardView:
        return self.sessions.renderer_for_card(card_id).view(card_id)

    def navigate(self, card_id: str, direction: Optional[str] = None,
                 index: Optional[int] = None) -> CardView:
        renderer = self.sessions.renderer_for_card(card_id)
        controller = renderer.arena.get(card_id)
        if index is not None:
            controller.set_image_index(index)
        elif direction == "previous":
            controller.previous()
        elif direction == "next":
            controller.next()
        else:
            raise ValueError(f"Dirección inválida: {direction!r}")
        return renderer.view(card_id)

    def report_image(self, card_id: str, generation: int, position: int, ok: bool,
                     width: int = 0, height: int = 0) -> bool:
        controller = self.sessions.renderer_for_card(card_id).arena.get(card_id)
        if ok:
            return controller.report_load(generation, position, width, height)
        return controller.report_error(generation, position)
