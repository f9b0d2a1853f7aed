"""
REST API base library
"""

import json
import logging
from typing import Any, Callable, Coroutine, Dict, List, Optional, get_origin

from fastapi import HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import negotiation
from .. import schemas


logger = logging.getLogger(__name__)


def _make_error_response(request: Request, error: schemas.APIError, headers: Optional[Dict[str, str]] = None):
    media_type = negotiation.select_media_type(request.headers.get("Accept"))
    return negotiation.render(
        jsonable_encoder(error),
        media_type or negotiation.DEFAULT_MEDIA_TYPE,
        error.status,
        root=schemas.APIError.__name__,
        headers=headers
    )


async def handle_generic_exception(request: Request, _: Exception):
    logger.exception("Unhandled exception caught in base exception handler!")
    status_code = 500
    msg = "Unexpected server error. The requested action wasn't completed successfully."

    return _make_error_response(request, schemas.APIError(
        status=status_code,
        method=request.method,
        request=request.url.path,
        repeat=False,
        message=msg,
        details=""
    ))


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    status_code = 400
    msgs = "\n".join(["\t" + error["msg"] for error in exc.errors()])
    message = f"Failed to process the request:\n{msgs}"
    logger.debug(f"Invalid request @ '{request.method} {request.url.path}': {exc.errors()}")

    return _make_error_response(request, schemas.APIError(
        status=status_code,
        method=request.method,
        request=request.url.path,
        repeat=False,
        message=message,
        details=str(exc.errors())
    ))


class APIException(HTTPException):
    """
    Base class for any kind of generic API exception
    """

    def __init__(
            self,
            status_code: int,
            detail: Optional[str],
            repeat: bool = False,
            message: Optional[str] = None,
            headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.repeat = repeat
        self.message = message

    @classmethod
    async def handle(cls, request: Request, exc: StarletteHTTPException) -> Response:
        """
        Handle exceptions in a generic way to produce APIError models
        """

        status_code = getattr(exc, "status_code", 500)
        repeat = getattr(exc, "repeat", False)
        message = getattr(exc, "message", None) or exc.__class__.__name__

        if not isinstance(exc, StarletteHTTPException):
            logger.error("Invalid exception class for base handler")

        logger.debug(
            f"{type(exc).__name__}: {message} @ '{request.method} "
            f"{request.url.path}' (details: {exc.detail})"
        )
        return _make_error_response(request, schemas.APIError(
            status=status_code,
            method=request.method,
            request=request.url.path,
            repeat=repeat,
            message=message,
            details=str(exc.detail)
        ), headers=getattr(exc, "headers", None))


class BadRequest(APIException):
    """
    Exception when the user probably messed something up

    The `message` field must be user-friendly and not too informative!
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            status_code=400,
            detail=detail,
            repeat=True,
            message=message
        )


class UnsupportedMathOperation(BadRequest):
    """
    Exception when a calculation was requested with invalid operands
    """


class NotFound(APIException):
    """
    Exception when a requested resource was not found in the system
    """

    def __init__(self, resource: str, detail: Optional[str] = None):
        super().__init__(
            status_code=404,
            detail=detail or str(resource),
            repeat=False,
            message="No records found for this ID!"
        )


class NotAcceptable(APIException):
    """
    Exception when none of the media types accepted by the client can be produced
    """

    def __init__(self, accept: Optional[str]):
        super().__init__(
            status_code=406,
            detail=f"Accept: {accept}",
            repeat=False,
            message="None of the accepted media types can be produced. "
                    f"Supported: {', '.join(m.value for m in negotiation.MediaType)}."
        )


class UnsupportedMediaType(APIException):
    """
    Exception when the request body uses a media type that can't be consumed
    """

    def __init__(self, content_type: Optional[str]):
        super().__init__(
            status_code=415,
            detail=f"Content-Type: {content_type}",
            repeat=False,
            message="The media type of the request body is not supported. "
                    f"Supported: {', '.join(m.value for m in negotiation.MediaType)}."
        )


class InternalServerException(APIException):
    """
    Exception for problems within the server implementation
    """

    def __init__(self, message: str, detail: Optional[str] = None, repeat: bool = False):
        super().__init__(
            status_code=500,
            detail=detail,
            repeat=repeat,
            message=message
        )


class _TranslatedRequest(Request):
    def __init__(self, request: Request, body: bytes):
        scope = dict(request.scope)
        scope["headers"] = [(k, v) for k, v in request.scope["headers"] if k.lower() != b"content-type"]
        scope["headers"].append((b"content-type", negotiation.MediaType.JSON.value.encode("latin-1")))
        super().__init__(scope, request.receive)
        self._body = body


async def translate_request_body(request: Request) -> Request:
    """
    Return a request carrying a JSON body, translating XML or YAML bodies if necessary

    :raises UnsupportedMediaType: when the body uses an unknown media type
    :raises BadRequest: when the body can't be parsed
    """

    content_type = request.headers.get("Content-Type")
    media_type = negotiation.parse_content_type(content_type)
    if media_type == negotiation.MediaType.JSON:
        return request

    body = await request.body()
    if not body:
        return request
    if media_type is None:
        raise UnsupportedMediaType(content_type)

    try:
        data = negotiation.decode(body, media_type)
    except negotiation.DecodeError as exc:
        raise BadRequest("The request body could not be parsed.", str(exc)) from exc
    return _TranslatedRequest(request, json.dumps(jsonable_encoder(data)).encode("utf-8"))


def get_root_tag(response_model: Any) -> str:
    if get_origin(response_model) in (list, List):
        return negotiation.LIST_ROOT_TAG
    return getattr(response_model, "__name__", negotiation.DEFAULT_ROOT_TAG)


class NegotiatingRoute(APIRoute):
    """
    Route class performing content negotiation for request and response bodies

    Path operations of routers using this route class always produce JSON
    responses internally, which are re-encoded afterwards if the client
    prefers XML or YAML. Likewise, XML and YAML request bodies are
    translated into JSON before the path operation validates them.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()
        root = get_root_tag(self.response_model)

        async def negotiating_route_handler(request: Request) -> Response:
            accept = request.headers.get("Accept")
            media_type = negotiation.select_media_type(accept)
            if media_type is None:
                raise NotAcceptable(accept)

            response = await original_route_handler(await translate_request_body(request))
            return negotiate_response(response, media_type, root)

        return negotiating_route_handler


def negotiate_response(response: Response, media_type: negotiation.MediaType, root: str) -> Response:
    """
    Re-encode a JSON response using the given media type

    Responses without a JSON body (e.g. ``204 No Content``) are returned
    unchanged, regardless of the class FastAPI used to produce them.
    """

    content_type = response.headers.get("content-type", "")
    if media_type == negotiation.MediaType.JSON or not content_type.startswith(negotiation.MediaType.JSON.value):
        response.headers["Vary"] = "Accept"
        return response

    headers = {
        k: v for k, v in response.headers.items()
        if k.lower() not in ("content-length", "content-type")
    }
    return negotiation.render(
        json.loads(response.body),
        media_type,
        response.status_code,
        root=root,
        headers=headers
    )
