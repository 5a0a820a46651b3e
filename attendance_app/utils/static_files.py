import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".txt": "text/plain; charset=utf-8",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class UnsafePathError(ValueError):
    """Request path is malformed or points outside the public directory."""


def decode_request_path(raw_path: str) -> str:
    if _BAD_ESCAPE.search(raw_path):
        raise UnsafePathError(f"malformed escape in {raw_path!r}")
    try:
        return unquote(raw_path, errors="strict")
    except UnicodeDecodeError as e:
        raise UnsafePathError(str(e))


def resolve_static_path(root: Path, request_path: str) -> Optional[Path]:
    """
    Map a decoded URL path onto a file under `root`.

    "/" maps to index.html. Returns None when no such file exists.
    Raises UnsafePathError if the path escapes `root`.
    """
    if request_path in ("", "/"):
        request_path = "/index.html"
    if "\x00" in request_path:
        raise UnsafePathError("NUL byte in path")

    root = root.resolve()
    candidate = (root / request_path.lstrip("/")).resolve()
    if candidate != root and root not in candidate.parents:
        raise UnsafePathError(f"{request_path!r} is outside the public directory")
    if not candidate.is_file():
        return None
    return candidate


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)
