"""Litestar application factory."""

from litestar import Litestar, MediaType, Request, Response, get
from litestar.di import Provide
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_502_BAD_GATEWAY,
)
from loguru import logger

from api.dependencies import (
    provide_import_service,
    provide_link_import_service,
    provide_metadata_sync_service,
    provide_problem_service,
)
from api.routes import ProblemController
from domain.exceptions import (
    FileParseError,
    FileReadError,
    ImportInProgressError,
    LinkImportError,
    NoMatchesFoundError,
    PersistenceError,
    StaleResultError,
    UnsupportedFormatError,
    URLParsingError,
)
from infrastructure.config import Settings, get_settings
from infrastructure.logging_config import configure_logging
from services import ProblemNotFoundError, Services, create_services


def _error(status_code: int, detail: str, **extra) -> Response:
    return Response(
        content={"detail": detail, **extra},
        status_code=status_code,
        media_type=MediaType.JSON,
    )


def handle_unsupported(_: Request, exc: UnsupportedFormatError) -> Response:
    return _error(HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(exc))


def handle_read_error(_: Request, exc: FileReadError) -> Response:
    return _error(HTTP_422_UNPROCESSABLE_ENTITY, str(exc))


def handle_parse_error(_: Request, exc: FileParseError) -> Response:
    return _error(HTTP_422_UNPROCESSABLE_ENTITY, str(exc), format=exc.extension)


def handle_no_matches(_: Request, exc: NoMatchesFoundError) -> Response:
    return Response(
        content={"source": exc.source, "added_count": 0, "total_found": 0, "message": str(exc)},
        status_code=HTTP_200_OK,
        media_type=MediaType.JSON,
    )


def handle_conflict(_: Request, exc: Exception) -> Response:
    return _error(HTTP_409_CONFLICT, str(exc))


def handle_persistence(_: Request, exc: PersistenceError) -> Response:
    pending = exc.result.added_count if exc.result else 0
    return _error(HTTP_502_BAD_GATEWAY, str(exc), retryable=exc.result is not None, pending_added_count=pending)


def handle_bad_request(_: Request, exc: Exception) -> Response:
    return _error(HTTP_400_BAD_REQUEST, str(exc))


def handle_not_found(_: Request, exc: ProblemNotFoundError) -> Response:
    return _error(HTTP_404_NOT_FOUND, str(exc))


EXCEPTION_HANDLERS = {
    UnsupportedFormatError: handle_unsupported,
    FileReadError: handle_read_error,
    FileParseError: handle_parse_error,
    NoMatchesFoundError: handle_no_matches,
    ImportInProgressError: handle_conflict,
    StaleResultError: handle_conflict,
    PersistenceError: handle_persistence,
    URLParsingError: handle_bad_request,
    LinkImportError: handle_bad_request,
    ProblemNotFoundError: handle_not_found,
}


@get("/health", status_code=HTTP_200_OK)
async def health() -> dict[str, str]:
    return {"status": "ok"}


def create_app(settings: Settings | None = None, services: Services | None = None) -> Litestar:
    """Build the application. Pass ``services`` to inject test doubles."""
    settings = settings or get_settings()

    async def on_startup(app: Litestar) -> None:
        configure_logging(settings.log_level)
        app.state.services = services or create_services(settings)
        logger.info("Problem tracker API started")

    async def on_shutdown(app: Litestar) -> None:
        await app.state.services.close()

    return Litestar(
        route_handlers=[ProblemController, health],
        on_startup=[on_startup],
        on_shutdown=[on_shutdown],
        dependencies={
            "problem_service": Provide(provide_problem_service, sync_to_thread=False),
            "import_service": Provide(provide_import_service, sync_to_thread=False),
            "link_import_service": Provide(provide_link_import_service, sync_to_thread=False),
            "metadata_sync_service": Provide(provide_metadata_sync_service, sync_to_thread=False),
        },
        exception_handlers=EXCEPTION_HANDLERS,
    )
