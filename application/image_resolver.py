import re
from typing import Optional
from urllib.parse import urlsplit
from core.entities import VariantChain

# Orden según tasa de éxito observada; la miniatura puede recortar, va al final
DRIVE_TEMPLATES = (
    "https://drive.google.com/uc?export=view&id={id}",
    "https://drive.google.com/uc?export=download&id={id}",
    "https://lh3.googleusercontent.com/d/{id}=w1600",
    "https://drive.google.com/thumbnail?id={id}&sz=w1600",
)

_ID_PATTERNS = (
    re.compile(r"/d/([a-zA-Z0-9_-]+?)(?:[^a-zA-Z0-9_-]|$)"),            # .../file/d/<ID>/view
    re.compile(r"[?&]id=([a-zA-Z0-9_-]+?)(?:[^a-zA-Z0-9_-]|$)"),        # ...?id=<ID>
    re.compile(r"uc\?[^#]*?id=([a-zA-Z0-9_-]+?)(?:[^a-zA-Z0-9_-]|$)"),  # ...uc?export=view&id=<ID>
)


def is_absolute_http_url(raw: str) -> bool:
    try:
        parts = urlsplit(raw)
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def extract_file_id(raw: Optional[str]) -> str:
    """Extrae el ID de archivo de Drive de una URL cruda; '' si no hay."""
    if not raw:
        return ""
    u = str(raw).strip()
    for pattern in _ID_PATTERNS:
        m = pattern.search(u)
        if m:
            return m.group(1)
    return ""


class ImageReferenceResolver:
    """Convierte una URL cruda en la cadena de variantes a intentar."""

    def __init__(self, templates=DRIVE_TEMPLATES):
        self.templates = tuple(templates)

    def resolve(self, raw: Optional[str]) -> VariantChain:
        file_id = extract_file_id(raw)
        if not file_id:
            u = str(raw or "").strip()
            # ya es una URL directa
            if u and is_absolute_http_url(u):
                return (u,)
            return ()
        return tuple(t.format(id=file_id) for t in self.templates)


def resolve(raw: Optional[str]) -> VariantChain:
    return ImageReferenceResolver().resolve(raw)
