import asyncio
import logging
from typing import Optional

import click
from flask import Flask, jsonify, request
from flask_cors import CORS, cross_origin
from werkzeug.exceptions import HTTPException

from application.carousel import CarouselArena
from application.filters import CatalogFilterEngine
from application.image_resolver import ImageReferenceResolver
from application.rendering import CardRenderer
from application.services import CatalogService
from application.sessions import RenderSessionManager
from application.store import ProductStore
from application.use_cases import FilterCatalogUseCase, LoadCatalogUseCase
from application.variant_loader import VariantFallbackLoader
from core.entities import LoadStatus
from core.exceptions import CatalogError
from core.ports import ImageSurface, NullImageSurface, ProductSource

from infrastructure.config import CatalogConfig, get_settings
from infrastructure.http.product_source import HttpProductSource
from infrastructure.images.probe import HttpImageSurface
from infrastructure.web.controllers import CatalogController

logger = logging.getLogger(__name__)


def build_catalog_service(config: CatalogConfig, surface: ImageSurface,
                          source: Optional[ProductSource] = None) -> CatalogService:
    # Inyección de dependencias
    source = source or HttpProductSource(config.api_base, timeout=config.http_timeout)
    store = ProductStore()
    engine = CatalogFilterEngine(config.out_of_stock_policy)
    loader = VariantFallbackLoader(surface, config.placeholder_url)
    resolver = ImageReferenceResolver()

    def renderer_factory(session_id: str) -> CardRenderer:
        return CardRenderer(CarouselArena(resolver, loader, session_id))

    return CatalogService(
        LoadCatalogUseCase(source, store),
        FilterCatalogUseCase(store, engine),
        RenderSessionManager(renderer_factory, config.max_sessions),
        store,
    )


async def check_images(config: CatalogConfig, source: Optional[ProductSource] = None,
                       surface: Optional[HttpImageSurface] = None):
    """Carga el catálogo y prueba la primera imagen de cada producto."""
    surface = surface or HttpImageSurface(timeout=config.http_timeout)
    try:
        service = build_catalog_service(config, surface, source)
        await service.load()
        grid = service.render()
        await surface.drain()
        return [service.card(c.card_id) for c in grid.cards]
    finally:
        await surface.close()


def create_app(config: Optional[CatalogConfig] = None, source: Optional[ProductSource] = None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = Flask(__name__)
    CORS(app, resources={r"/*": {"origins": "*"}})

    # Configuración
    config = config or get_settings()
    if not config.api_base:
        logger.warning("FERJO_API_BASE no está configurado")

    # El navegador carga las imágenes y reporta load/error por HTTP
    catalog_service = build_catalog_service(config, NullImageSurface(), source)
    catalog_controller = CatalogController(catalog_service)
    app.extensions["catalog_service"] = catalog_service

    # Rutas
    @app.route("/ping", methods=["GET"])
    def ping():
        return catalog_controller.ping()

    @app.route("/products", methods=["GET", "OPTIONS"])
    @cross_origin(origins="*")
    def products():
        if request.method == "OPTIONS":
            return ("", 204)
        return catalog_controller.list_products()

    @app.route("/categories", methods=["GET", "OPTIONS"])
    @cross_origin(origins="*")
    def categories():
        if request.method == "OPTIONS":
            return ("", 204)
        return catalog_controller.list_categories()

    @app.route("/cards/<card_id>/navigate", methods=["POST"])
    def navigate(card_id: str):
        return catalog_controller.navigate(card_id)

    @app.route("/cards/<card_id>/image-outcome", methods=["POST"])
    def image_outcome(card_id: str):
        return catalog_controller.image_outcome(card_id)

    @app.cli.command("check-images")
    def check_images_command():
        """Prueba las variantes de imagen de todo el catálogo."""
        try:
            views = asyncio.run(check_images(config, source))
        except CatalogError as e:
            raise click.ClickException(e.message)
        for view in views:
            if view.image.status == LoadStatus.SUCCESS:
                click.echo(f"OK    {view.name}: {view.image.src} ({view.image.orientation.value})")
            else:
                click.echo(f"FALLA {view.name}: placeholder")

    # Manejo de errores
    @app.errorhandler(Exception)
    def handle_any_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Error no controlado")
        return jsonify({"error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5057, debug=True)
