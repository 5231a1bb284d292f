from abc import ABC, abstractmethod
from typing import Callable, List
from .entities import ProductRecord

# (width, height) de la imagen cargada
LoadCallback = Callable[[int, int], None]
ErrorCallback = Callable[[], None]


class ProductSource(ABC):
    """Puerto para obtener la lista de productos"""

    @abstractmethod
    async def fetch_products(self) -> List[ProductRecord]:
        pass


class ImageSurface(ABC):
    """Puerto para la superficie visual donde se carga una imagen"""

    @abstractmethod
    def begin_load(self, card_id: str, url: str, on_load: LoadCallback, on_error: ErrorCallback) -> None:
        pass

    @abstractmethod
    def show_placeholder(self, card_id: str, url: str) -> None:
        pass


class NullImageSurface(ImageSurface):
    """El navegador carga la imagen y reporta el resultado por HTTP."""

    def begin_load(self, card_id, url, on_load, on_error):
        pass

    def show_placeholder(self, card_id, url):
        pass
