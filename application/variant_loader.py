import logging
from functools import partial
from core.entities import CarouselState, LoadStatus, Orientation
from core.ports import ImageSurface

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://via.placeholder.com/600x450?text=FERJO"


class VariantFallbackLoader:
    """
    Recorre la cadena de variantes de una imagen sobre una superficie hasta
    que una carga o se agota la cadena (placeholder).

    Cada intento va sellado con (generation, position); los callbacks de una
    generación o posición que ya no es la vigente se ignoran.
    """

    def __init__(self, surface: ImageSurface, placeholder_url: str = PLACEHOLDER_URL):
        self.surface = surface
        self.placeholder_url = placeholder_url

    def load(self, state: CarouselState) -> None:
        """Arranca una nueva generación para la cadena actual del estado."""
        state.generation += 1
        state.variant_index = 0
        state.orientation = None
        self._attempt(state)

    def show_placeholder(self, state: CarouselState) -> None:
        state.status = LoadStatus.EXHAUSTED
        state.orientation = None
        state.current_url = self.placeholder_url
        self.surface.show_placeholder(state.card_id, self.placeholder_url)

    def _attempt(self, state: CarouselState) -> None:
        if state.variant_index >= len(state.chain):
            if state.chain:
                logger.warning(
                    f"Card {state.card_id}: las {len(state.chain)} variantes de la imagen "
                    f"{state.image_index} fallaron, usando placeholder"
                )
            self.show_placeholder(state)
            return

        state.status = LoadStatus.ATTEMPTING
        state.current_url = state.chain[state.variant_index]
        generation, position = state.generation, state.variant_index
        self.surface.begin_load(
            state.card_id,
            state.current_url,
            partial(self.handle_success, state, generation, position),
            partial(self.handle_failure, state, generation, position),
        )

    def _is_current(self, state: CarouselState, generation: int, position: int) -> bool:
        return (
            state.status == LoadStatus.ATTEMPTING
            and generation == state.generation
            and position == state.variant_index
        )

    def handle_success(self, state: CarouselState, generation: int, position: int,
                       width: int, height: int) -> bool:
        if not self._is_current(state, generation, position):
            logger.debug(f"Card {state.card_id}: carga obsoleta ignorada (gen {generation}, pos {position})")
            return False
        state.status = LoadStatus.SUCCESS
        state.orientation = Orientation.PORTRAIT if height > width else Orientation.LANDSCAPE
        return True

    def handle_failure(self, state: CarouselState, generation: int, position: int) -> bool:
        if not self._is_current(state, generation, position):
            logger.debug(f"Card {state.card_id}: error obsoleto ignorado (gen {generation}, pos {position})")
            return False
        logger.info(f"Card {state.card_id}: falló la variante {position}: {state.current_url}")
        state.variant_index += 1
        self._attempt(state)
        return True
