import logging
from itertools import count
from typing import Dict, List, Tuple
from core.entities import CarouselState, Indicator
from core.exceptions import CardNotFoundError
from .image_resolver import ImageReferenceResolver
from .variant_loader import VariantFallbackLoader

logger = logging.getLogger(__name__)

SESSION_SEPARATOR = ":"


class CardCarouselController:
    """Carrusel de hasta tres imágenes de una tarjeta."""

    def __init__(self, state: CarouselState, resolver: ImageReferenceResolver,
                 loader: VariantFallbackLoader):
        self.state = state
        self.resolver = resolver
        self.loader = loader
        self._indicators: Tuple[Indicator, ...] = ()

    @property
    def source_count(self) -> int:
        return len(self.state.sources)

    @property
    def show_navigation(self) -> bool:
        return self.source_count > 1

    @property
    def indicators(self) -> Tuple[Indicator, ...]:
        return self._indicators

    def start(self) -> None:
        if self.source_count == 0:
            # sin fuentes: directo al placeholder, sin pasar por el resolver
            self.state.generation += 1
            self.loader.show_placeholder(self.state)
            return
        self.set_image_index(0)

    def set_image_index(self, i: int) -> None:
        n = self.source_count
        if n == 0:
            return
        self.state.image_index = i % n
        self.state.chain = self.resolver.resolve(self.state.sources[self.state.image_index])
        logger.debug(
            f"Card {self.state.card_id}: imagen {self.state.image_index}, "
            f"{len(self.state.chain)} variantes"
        )
        self.loader.load(self.state)
        self.rebuild_indicators()

    def next(self) -> None:
        n = self.source_count
        if n:
            self.set_image_index((self.state.image_index + 1) % n)

    def previous(self) -> None:
        n = self.source_count
        if n:
            self.set_image_index((self.state.image_index - 1 + n) % n)

    def rebuild_indicators(self) -> Tuple[Indicator, ...]:
        if self.source_count > 1:
            self._indicators = tuple(
                Indicator(index=i, active=(i == self.state.image_index))
                for i in range(self.source_count)
            )
        else:
            self._indicators = ()
        return self._indicators

    def report_load(self, generation: int, position: int, width: int, height: int) -> bool:
        return self.loader.handle_success(self.state, generation, position, width, height)

    def report_error(self, generation: int, position: int) -> bool:
        return self.loader.handle_failure(self.state, generation, position)


class CarouselArena:
    """
    Controladores de carrusel indexados por card_id.

    Cada render completo descarta todas las tarjetas; los ids incluyen la
    sesión del cliente y la secuencia de render, así que un id de un render
    anterior ya no existe.
    """

    def __init__(self, resolver: ImageReferenceResolver, loader: VariantFallbackLoader,
                 session_id: str = ""):
        self.resolver = resolver
        self.loader = loader
        self.session_id = session_id
        self._cards: Dict[str, CardCarouselController] = {}
        self._render_seq = count(1)
        self._current_seq = 0

    def reset(self) -> None:
        self._cards = {}
        self._current_seq = next(self._render_seq)

    def create(self, position: int, sources: List[str]) -> CardCarouselController:
        card_id = f"{self._current_seq}-{position}"
        if self.session_id:
            card_id = f"{self.session_id}{SESSION_SEPARATOR}{card_id}"
        state = CarouselState(card_id=card_id, sources=list(sources))
        controller = CardCarouselController(state, self.resolver, self.loader)
        self._cards[card_id] = controller
        return controller

    def get(self, card_id: str) -> CardCarouselController:
        controller = self._cards.get(card_id)
        if controller is None:
            raise CardNotFoundError(f"Tarjeta no encontrada: {card_id}", {"card_id": card_id})
        return controller

    def __len__(self) -> int:
        return len(self._cards)
