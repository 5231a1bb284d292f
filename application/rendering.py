from typing import Iterable, List
from core.entities import CardView, ImageSlot, ProductRecord
from .carousel import CardCarouselController, CarouselArena
from .filters import is_out_of_stock
from .formatting import format_price

NO_NAME = "(Sin nombre)"
DEFAULT_ALT = "Producto FERJO"


def _quantity_text(qty) -> str:
    if qty is None:
        return "0"
    return str(int(qty)) if float(qty).is_integer() else str(qty)


def card_view(product: ProductRecord, controller: CardCarouselController) -> CardView:
    state = controller.state
    sin_stock = is_out_of_stock(product)
    return CardView(
        card_id=state.card_id,
        name=product.name or NO_NAME,
        code_text=f"Código: {product.display_code}",
        price_text=f"Precio: {format_price(product.price, product.currency)}",
        stock_text="Sin stock" if sin_stock else f"Stock: {_quantity_text(product.quantity)}",
        out_of_stock=sin_stock,
        add_to_cart_enabled=not sin_stock,
        show_navigation=controller.show_navigation,
        image=ImageSlot(
            src=state.current_url,
            alt=product.name or DEFAULT_ALT,
            status=state.status,
            generation=state.generation,
            position=state.variant_index,
            orientation=state.orientation,
        ),
        indicators=controller.indicators,
    )


class CardRenderer:
    """Arma las tarjetas del grid. Cada llamada reemplaza todas las anteriores."""

    def __init__(self, arena: CarouselArena):
        self.arena = arena
        self._products = {}

    def render(self, products: Iterable[ProductRecord]) -> List[CardView]:
        self.arena.reset()
        self._products = {}
        cards = []
        for position, product in enumerate(products):
            controller = self.arena.create(position, product.image_sources)
            self._products[controller.state.card_id] = product
            controller.start()
            cards.append(card_view(product, controller))
        return cards

    def view(self, card_id: str) -> CardView:
        controller = self.arena.get(card_id)
        return card_view(self._products[card_id], controller)
