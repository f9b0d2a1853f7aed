"""
Combined REST API definitions for people, books and calculations

The resources people and books are provided in multiple versions of the API,
which are mounted below the resource prefix, e.g. ``/api/person/v2``. Take
a look into the ``/versions`` endpoint to see which versions are available.
The calculator endpoints below ``/math`` and the ``/health`` endpoint are
not versioned at all.

Responses of the resource endpoints are negotiated using the ``Accept`` header
of the request: JSON (the default), XML and YAML are supported. Request bodies
may use any of those media types as well, as given in the ``Content-Type``.
All error responses use the schema of the ``APIError``.
"""

import logging.config
from typing import Any, Callable, Dict, Optional

import fastapi
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import base, versioning
from .routers import books, calculator, generic, people
from .. import schemas, __version__
from ..persistence import storage
from ..settings import Settings


API_VERSIONS = [1, 2]

DEFAULT_EXCEPTION_HANDLERS: Dict[Any, Callable] = {
    StarletteHTTPException: base.APIException.handle,
    RequestValidationError: base.handle_request_validation_error,
    Exception: base.handle_generic_exception
}


def create_app(
        settings: Optional[Settings] = None,
        configure_logging: bool = True,
        configure_storage: bool = True,
        exception_handlers: Optional[Dict[Any, Callable]] = None
) -> versioning.VersionedFastAPI:
    """
    Create a new ``FastAPI`` instance using the specified settings and switches

    This function is conveniently used to allow overwriting the settings
    before launching the application as well as to allow multiple ``FastAPI``
    instances in one program, which in turn makes unit testing much easier.

    :param settings: optional Settings instance (would be created if not present)
    :param configure_logging: switch whether to configure logging
    :param configure_storage: switch whether to (re-)initialize the storage with mock data
    :param exception_handlers: optional mapping to replace the default exception handlers
    :return: new ``FastAPI`` instance
    """

    if settings is None:
        settings = Settings()
    if settings.server.debug:
        settings.logging.enable_debug()

    if configure_logging:
        logging.config.dictConfig(settings.logging.model_dump())
    logger = logging.getLogger(__name__)
    logger.debug("Starting application...")

    if configure_storage:
        storage.init(settings.storage.mock_people, settings.storage.mock_books)

    app = versioning.VersionedFastAPI(
        title="REST APIs core",
        version=__version__,
        description=__doc__,
        api_versions=API_VERSIONS,
        logger=logger,
        responses={400: {"model": schemas.APIError}}
    )

    handlers = exception_handlers or DEFAULT_EXCEPTION_HANDLERS
    for exc in handlers:
        app.add_exception_handler(exc, handlers[exc])

    if settings.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"]
        )

    app.add_router(people.router, prefix="/api/person")
    app.add_router(books.router, prefix="/api/book")
    app.include_router(calculator.router)
    app.include_router(generic.router)

    app.finish()
    return app


class APIWrapper:
    """
    Wrapper class around the FastAPI main object, accessible via the ``app`` property

    There should be only one global instance of this object, which should only
    export its functionality to hold the ``app`` property. This wrapper can be
    used to allow easy command-line usage via ``uvicorn`` calls. Example:

    .. code-block::

        uvicorn restapis_core.api.api:api.app
    """

    def __init__(self):
        self._app: Optional[fastapi.FastAPI] = None

    @property
    def app(self) -> fastapi.FastAPI:
        """
        Return the ``app`` instance (or create it with default settings if it doesn't exist)
        """

        if self._app is not None:
            return self._app
        self._app = create_app()
        return self._app


api = APIWrapper()
