from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

DEFAULT_CURRENCY = "GTQ"
NO_STOCK_STATUS = "sin_stock"

# Lista ordenada de URLs candidatas para una misma imagen
VariantChain = Tuple[str, ...]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        return float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ProductRecord:
    """Producto tal como llega del API (hoja de cálculo)."""
    name: str = ""
    code: str = ""
    alt_code: str = ""
    category: str = ""
    price: Optional[float] = None
    currency: str = DEFAULT_CURRENCY
    quantity: Optional[float] = None
    status: str = ""
    image_url: str = ""
    image_url_2: str = ""
    image_url_3: str = ""

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]]) -> "ProductRecord":
        raw = raw or {}
        return cls(
            name=_text(raw.get("nombre")),
            code=_text(raw.get("id_del_articulo")),
            alt_code=_text(raw.get("upc_ean_isbn")),
            category=_text(raw.get("categoria")),
            price=_number(raw.get("precio_de_venta")),
            currency=_text(raw.get("moneda")).strip() or DEFAULT_CURRENCY,
            quantity=_number(raw.get("cantidad")),
            status=_text(raw.get("status")),
            image_url=_text(raw.get("image_url")),
            image_url_2=_text(raw.get("image_url_2")),
            image_url_3=_text(raw.get("image_url_3")),
        )

    @property
    def image_sources(self) -> List[str]:
        """Fuentes de imagen no vacías, en orden."""
        return [s for s in (self.image_url, self.image_url_2, self.image_url_3) if s]

    @property
    def display_code(self) -> str:
        return self.code or self.alt_code or "-"


class LoadStatus(str, Enum):
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass
class CarouselState:
    """Estado mutable del carrusel de una tarjeta. Solo lo toca su controlador."""
    card_id: str
    sources: List[str]
    image_index: int = 0
    variant_index: int = 0
    chain: VariantChain = ()
    generation: int = 0
    status: LoadStatus = LoadStatus.ATTEMPTING
    orientation: Optional[Orientation] = None
    current_url: str = ""


@dataclass(frozen=True)
class FilterCriteria:
    query: str = ""
    category: Optional[str] = None

    @classmethod
    def build(cls, query: Optional[str] = "", category: Optional[str] = None) -> "FilterCriteria":
        return cls(query=(query or "").lower().strip(), category=category or None)


@dataclass(frozen=True)
class Indicator:
    index: int
    active: bool


@dataclass(frozen=True)
class ImageSlot:
    src: str
    alt: str
    status: LoadStatus
    generation: int
    position: int
    orientation: Optional[Orientation] = None


@dataclass(frozen=True)
class CardView:
    """Instrucciones de render para una tarjeta del grid."""
    card_id: str
    name: str
    code_text: str
    price_text: str
    stock_text: str
    out_of_stock: bool
    add_to_cart_enabled: bool
    show_navigation: bool
    image: ImageSlot
    indicators: Tuple[Indicator, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "name": self.name,
            "code": self.code_text,
            "price": self.price_text,
            "stock": self.stock_text,
            "out_of_stock": self.out_of_stock,
            "add_to_cart_enabled": self.add_to_cart_enabled,
            "show_navigation": self.show_navigation,
            "image": {
                "src": self.image.src,
                "alt": self.image.alt,
                "status": self.image.status.value,
                "generation": self.image.generation,
                "position": self.image.position,
                "orientation": self.image.orientation.value if self.image.orientation else None,
            },
            "indicators": [{"index": i.index, "active": i.active} for i in self.indicators],
        }


@dataclass(frozen=True)
class RenderedGrid:
    """Un render completo del grid para una sesión de cliente."""
    session_id: str
    cards: Tuple[CardView, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "session": self.session_id,
            "total": len(self.cards),
            "cards": [c.to_dict() for c in self.cards],
        }
