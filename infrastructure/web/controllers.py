# controllers.py
import asyncio
import json
import logging

from flask import current_app, request

from application.services import CatalogService
from core.exceptions import CardNotFoundError, ConfigurationError, NetworkOrFormatError

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = (
    "Error cargando productos. Revisa la URL del API en config.json "
    "o define FERJO_API_BASE."
)


def json_response(payload: dict, status: int = 200):
    return current_app.response_class(
        response=json.dumps(payload, ensure_ascii=False),
        status=status,
        mimetype="application/json; charset=utf-8",
    )


def _as_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_index(value) -> int:
    """Indice de imagen enviado por el cliente; ValueError si no es entero."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Indice inválido: {value!r}")
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Indice inválido: {value!r}") from None


# ========= controlador =========
class CatalogController:
    def __init__(self, catalog_service: CatalogService):
        self.catalog_service = catalog_service

    def _ensure_loaded(self):
        if not self.catalog_service.loaded:
            asyncio.run(self.catalog_service.load())

    def _load_error(self, e):
        # error fatal de la carga inicial: el grid muestra un único mensaje
        payload = e.to_dict()
        payload["message"] = LOAD_ERROR_MESSAGE
        return json_response(payload, 503)

    def ping(self):
        return json_response({"status": "ok"})

    def list_products(self):
        try:
            self._ensure_loaded()
            q = request.args.get("q") or ""
            category = request.args.get("category") or None
            # cada cliente re-renderiza solo su propio grid
            session_id = request.args.get("session") or None
            grid = self.catalog_service.render(q, category, session_id)
            return json_response(grid.to_dict())
        except (ConfigurationError, NetworkOrFormatError) as e:
            return self._load_error(e)
        except Exception as e:
            logger.exception("Error renderizando el catálogo")
            return json_response({"error": str(e)}, 500)

    def list_categories(self):
        try:
            self._ensure_loaded()
            return json_response({"categories": self.catalog_service.categories()})
        except (ConfigurationError, NetworkOrFormatError) as e:
            return self._load_error(e)

    def navigate(self, card_id: str):
        body = request.get_json(silent=True) or {}
        try:
            index = body.get("index")
            view = self.catalog_service.navigate(
                card_id,
                direction=body.get("direction"),
                index=_parse_index(index) if index is not None else None,
            )
            return json_response(view.to_dict())
        except CardNotFoundError as e:
            return json_response(e.to_dict(), 404)
        except ValueError as e:
            return json_response({"error": str(e)}, 400)

    def image_outcome(self, card_id: str):
        body = request.get_json(silent=True) or {}
        ok = body.get("ok")
        if not isinstance(ok, bool):
            return json_response({"error": f"'ok' debe ser true o false: {ok!r}"}, 400)
        try:
            accepted = self.catalog_service.report_image(
                card_id,
                generation=_as_int(body.get("generation"), -1),
                position=_as_int(body.get("position"), -1),
                ok=ok,
                width=_as_int(body.get("width")),
                height=_as_int(body.get("height")),
            )
            payload = self.catalog_service.card(card_id).to_dict()
            payload["accepted"] = accepted
            return json_response(payload)
        except CardNotFoundError as e:
            return json_response(e.to_dict(), 404)
