# attendance_app/main.py
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from attendance_app.config import Settings, settings
from attendance_app.core.bootstrap import wait_for_database
from attendance_app.database import Database
from attendance_app.routers import attendance, site
from attendance_app.services.attendance import AttendanceService

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse({"error": "Invalid request body", "message": message}, status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal Server Error"}, status_code=500)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(title="Attendance Service", version="1.0")

    # One store handle for the whole process
    database = Database(app_settings.effective_database_url, echo=app_settings.DB_ECHO)
    app.state.settings = app_settings
    app.state.database = database
    app.state.attendance_service = AttendanceService(database, enrichment=app_settings.ATTENDANCE_ENRICHMENT)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include Routers (site is the catch-all, keep it last)
    app.include_router(attendance.router)
    app.include_router(site.router)

    # Wait for the store before serving; raising here aborts startup.
    @app.on_event("startup")
    async def startup_event():
        await wait_for_database(
            database,
            retries=app_settings.DB_CONNECT_RETRIES,
            delay_ms=app_settings.DB_CONNECT_RETRY_DELAY_MS,
            include_directory=app_settings.ATTENDANCE_ENRICHMENT,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        await database.dispose()

    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting attendance service on %s:%d", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
