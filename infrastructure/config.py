"""
Catalog settings loaded from ``FERJO_*`` environment variables (or a .env
file), with the API base falling back to the ``API`` key of config.json.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from application.filters import OutOfStockPolicy
from application.variant_loader import PLACEHOLDER_URL

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent


def _api_from_file(path: Path) -> str:
    """Lee la clave API de un config.json (equivalente a window.CONFIG.API)."""
    if not path.exists():
        return ""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"No se pudo leer {path}: {e}")
        return ""
    return str(data.get("API") or "") if isinstance(data, dict) else ""


class CatalogConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FERJO_",  # FERJO_API_BASE es la misma clave que usa el Admin
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_base: str = Field(default="", description="URL base del API de productos")
    config_file: Path = Field(default=BASE_DIR / "config.json", description="config.json con la clave API")
    placeholder_url: str = PLACEHOLDER_URL
    exclude_out_of_stock: bool = Field(default=False, description="Quitar productos sin stock al filtrar")
    http_timeout: float = Field(default=30.0, gt=0)
    max_sessions: int = Field(default=256, ge=1, description="Grids de clientes vivos a la vez")

    @model_validator(mode="after")
    def _resolve_api_base(self) -> "CatalogConfig":
        api_base = self.api_base.strip() or _api_from_file(self.config_file)
        # siempre sin slash final redundante
        self.api_base = api_base.strip().rstrip("/")
        return self

    @property
    def out_of_stock_policy(self) -> OutOfStockPolicy:
        return OutOfStockPolicy.EXCLUDE if self.exclude_out_of_stock else OutOfStockPolicy.FLAG


@lru_cache(maxsize=1)
def get_settings() -> CatalogConfig:
    """Get cached settings instance"""
    return CatalogConfig()
