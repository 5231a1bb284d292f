"""
Product source over HTTP.

Fetches the product list from the spreadsheet-backed endpoint
(``<base>?path=products&t=<ms>``) with an async httpx client.
"""

import json
import logging
import time
from typing import List, Optional

import httpx

from core.entities import ProductRecord
from core.exceptions import ConfigurationError, NetworkOrFormatError
from core.ports import ProductSource

logger = logging.getLogger(__name__)


def build_products_url(base: str, now_ms: Optional[int] = None) -> str:
    """Construye ...?path=products&t=... sin duplicar el separador."""
    base = (base or "").rstrip("/")
    if not base:
        return ""
    join = "&" if "?" in base else "?"
    t = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{base}{join}path=products&t={t}"


class HttpProductSource(ProductSource):
    def __init__(self, api_base: str, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            api_base: Base URL of the products endpoint (may be empty)
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_base = api_base
        self.timeout = timeout
        self._transport = transport

    async def fetch_products(self) -> List[ProductRecord]:
        url = build_products_url(self.api_base)
        if not url:
            raise ConfigurationError(
                "No hay API configurada. Define FERJO_API_BASE o la clave API en config.json."
            )

        logger.info(f"Cargando catálogo desde {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport,
                                         follow_redirects=True) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise NetworkOrFormatError("No se pudo cargar el catálogo", {"reason": str(e)}) from e

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text[:200]}")
            raise NetworkOrFormatError("No se pudo cargar el catálogo", {"status": response.status_code})

        # Apps Script a veces responde JSON como text/plain o text/html
        try:
            data = json.loads(response.text)
        except ValueError as e:
            raise NetworkOrFormatError("La respuesta del catálogo no es JSON válido", {"reason": str(e)}) from e

        if isinstance(data, list):
            raw_products = data
        elif isinstance(data, dict):
            raw_products = data.get("products") or []
        else:
            raise NetworkOrFormatError("Formato de catálogo inesperado", {"type": type(data).__name__})

        return [ProductRecord.from_raw(item) for item in raw_products if isinstance(item, dict)]
