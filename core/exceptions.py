from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Error base del catálogo."""

    code = "CATALOG_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        out = {"error": self.message, "code": self.code}
        if self.details:
            out["details"] = self.details
        return out


class ConfigurationError(CatalogError):
    """No hay endpoint del API configurado."""

    code = "CONFIGURATION_ERROR"


class NetworkOrFormatError(CatalogError):
    """El fetch falló o el cuerpo no es JSON."""

    code = "NETWORK_OR_FORMAT_ERROR"


class CardNotFoundError(CatalogError):
    code = "CARD_NOT_FOUND"
