"""
API library to provide multiple versions of the API endpoints
"""

import logging
from typing import Callable, Iterable, List, Optional

import fastapi

from .. import schemas


VERSION_ANNOTATION_NAME = "_api_versions"
MAXIMAL_VERSION_ANNOTATION_NAME = "_maximal_api_version"
MINIMAL_VERSION_ANNOTATION_NAME = "_minimal_api_version"


def versions(
        *annotations: int,
        minimal: Optional[int] = None,
        maximal: Optional[int] = None
) -> Callable[[Callable], Callable]:
    """
    Decorate a path operation function with the version(s) of the API that should support it

    :param annotations: any number of explicit API versions that should include the decorated
        path operation (which can't be below or above the minimal and maximal values respectively)
    :param minimal: minimal version of APIs that should include the decorated path operation
    :param maximal: maximal version of APIs that should include the decorated path operation
    :return: decorator to use on a path operation function
    """

    if not all(map(lambda x: isinstance(x, int), annotations)):
        raise TypeError(f"Not all annotations are integers: {annotations!r}")
    if minimal:
        if not isinstance(minimal, int):
            raise TypeError(f"Expected int, got {type(minimal)!r}")
        if any(map(lambda x: x < minimal, annotations)):
            raise ValueError("Can't accept annotations smaller than the minimal version")
    if maximal:
        if not isinstance(maximal, int):
            raise TypeError(f"Expected int, got {type(maximal)!r}")
        if any(map(lambda x: x > maximal, annotations)):
            raise ValueError("Can't accept annotations bigger than the maximal version")

    def decorator(func: Callable) -> Callable:
        assert not hasattr(func, VERSION_ANNOTATION_NAME), "'versions' can't be used twice"
        assert not hasattr(func, MINIMAL_VERSION_ANNOTATION_NAME), "'versions' can't be used twice"
        assert not hasattr(func, MAXIMAL_VERSION_ANNOTATION_NAME), "'versions' can't be used twice"
        if annotations:
            setattr(func, VERSION_ANNOTATION_NAME, annotations)
        if minimal:
            setattr(func, MINIMAL_VERSION_ANNOTATION_NAME, minimal)
        if maximal:
            setattr(func, MAXIMAL_VERSION_ANNOTATION_NAME, maximal)
        return func

    return decorator


class VersionedFastAPI(fastapi.FastAPI):
    """
    Specialized FastAPI adding support for multiple versions of resource endpoints

    Use this class as in-place replacement for the previous FastAPI
    class. The constructor requires the ``api_versions`` parameter
    which defines the API versions that should be served. Only
    the API versions mentioned there will be enabled.

    To add a new versioned router to the API, use ``add_router`` instead
    of ``include_router``, since the latter would just add it and ignore
    the whole versioning part. The version is appended to the prefix of
    the router, so that a resource router added with prefix ``/api/book``
    serves its version 1 path operations below ``/api/book/v1``. After
    adding all the routers, call the ``finish`` method once to add the
    special ``/versions`` endpoint and to lock the API against changes.

    .. code-block::

        app = VersionedFastAPI(title="API", api_versions=[1, 2])
        app.add_router(..., prefix="/api/person")
        app.add_router(..., prefix="/api/book")
        ...
        app.finish()
    """

    def __init__(
            self,
            *args,
            api_versions: Iterable[int],
            version_format: str = "/v{}",
            logger: Optional[logging.Logger] = None,
            absolute_minimal_version: int = 0,
            absolute_maximal_version: Optional[int] = None,
            **kwargs
    ):
        assert version_format.count("{}") == 1, "Version format string must contain '{}' once"
        super().__init__(*args, **kwargs)
        self._api_versions: List[int] = sorted(set(api_versions))
        if not self._api_versions:
            raise ValueError("At least one API version is required")
        self._version_format = version_format
        self._logger = logger or logging.getLogger(__name__)
        self._abs_min = absolute_minimal_version
        self._abs_max = absolute_maximal_version or max(self._api_versions)
        self._finished = False

    def finish(self, versions_endpoint: bool = True):
        """
        Complete the registration of new routers once

        :param versions_endpoint: switch to enable the special ``/versions`` endpoint
        """

        if self._finished:
            return

        if versions_endpoint:
            @self.get("/versions", response_model=schemas.Versions, tags=["Miscellaneous"])
            async def get_version_info():
                return schemas.Versions(
                    latest=max(self._api_versions),
                    versions=[
                        {"version": v, "prefix": self._version_format.format(v)}
                        for v in self._api_versions
                    ]
                )

        self._finished = True

    def add_router(self, router: fastapi.APIRouter, prefix: str, **kwargs):
        """
        Add the routes of the router for every API version fulfilling their requirements

        :param router: APIRouter carrying all routes that should be filtered and added
        :param prefix: path prefix of the resource, which gets the version format appended
        :param kwargs: optional keyword arguments for the ``include_router`` method
        :raises TypeError: when there are problems with the annotated values of the endpoints
        """

        if self._finished:
            raise RuntimeError("Can't add new routers after the API has been finally built")

        for api_version in self._api_versions:
            filtered_routes = []
            for route in router.routes:
                if not isinstance(route, fastapi.routing.APIRoute):
                    self._logger.error(
                        f"Route {route!r} (type {type(route)!r}) is no 'APIRoute' instance! "
                        "Further operation might work properly, but is not guaranteed to."
                    )

                endpoint = getattr(route, "endpoint", None)
                if endpoint is None:
                    self._logger.error(f"Route {route!r} has no attribute 'endpoint'! Skipping.")
                    continue

                min_version = getattr(endpoint, MINIMAL_VERSION_ANNOTATION_NAME, self._abs_min)
                if not isinstance(min_version, int):
                    raise TypeError(f"Min version annotation {min_version!r} is no integer!")
                max_version = getattr(endpoint, MAXIMAL_VERSION_ANNOTATION_NAME, self._abs_max)
                if not isinstance(max_version, int):
                    raise TypeError(f"Max version annotation {max_version!r} is no integer!")

                explicit_versions = getattr(endpoint, VERSION_ANNOTATION_NAME, [])
                if not isinstance(explicit_versions, Iterable):
                    raise TypeError(f"Version annotation {explicit_versions!r} is not iterable!")
                if not all(map(lambda v: isinstance(v, int), explicit_versions)):
                    raise TypeError(f"Not all versions in {explicit_versions!r} are integers!")

                if not any([
                    hasattr(endpoint, VERSION_ANNOTATION_NAME),
                    hasattr(endpoint, MINIMAL_VERSION_ANNOTATION_NAME),
                    hasattr(endpoint, MAXIMAL_VERSION_ANNOTATION_NAME)
                ]):
                    self._logger.warning(
                        f"Route {route!r} has no supported annotated version! It will "
                        f"therefore only be supported on API version {max_version} by default."
                    )
                    min_version = max_version

                if min_version <= api_version <= max_version:
                    if not explicit_versions or api_version in explicit_versions:
                        filtered_routes.append(route)

            if not filtered_routes:
                continue

            versioned_prefix = prefix + self._version_format.format(api_version)
            self.include_router(
                fastapi.APIRouter(
                    prefix="",
                    default_response_class=router.default_response_class,
                    routes=filtered_routes
                ),
                prefix=versioned_prefix,
                **kwargs
            )
