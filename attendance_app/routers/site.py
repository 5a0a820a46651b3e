import logging
from fastapi import APIRouter, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool
from attendance_app.utils.static_files import (
    UnsafePathError,
    content_type_for,
    decode_request_path,
    resolve_static_path,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _request_path(request: Request) -> str:
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return request.url.path
    return decode_request_path(raw_path.split(b"?", 1)[0].decode("latin-1"))


# Registered last: anything no other router claimed ends up here.
@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def serve_public_file(full_path: str, request: Request):
    if request.method not in ("GET", "HEAD") or request.url.path.startswith("/api/"):
        raise HTTPException(404, "Not Found")

    public_dir = request.app.state.settings.PUBLIC_DIR
    try:
        file_path = resolve_static_path(public_dir, _request_path(request))
    except UnsafePathError as e:
        logger.info("Rejected static path %r: %s", request.url.path, e)
        raise HTTPException(400, "Bad Request")
    if file_path is None:
        raise HTTPException(404, "Not Found")

    try:
        content = await run_in_threadpool(file_path.read_bytes)
    except OSError:
        logger.exception("Failed to read %s", file_path)
        raise HTTPException(500, "Failed to read file")
    return Response(content=content, media_type=content_type_for(file_path))
