"""
Generic helper library for the core REST API
"""

import logging
from typing import Callable, List, Optional, TypeVar

import pydantic
from fastapi.responses import Response

from .base import NotFound
from ..persistence import models, storage
from ..misc.logger import enforce_logger


_M = TypeVar("_M", bound=models.Base)
_S = TypeVar("_S", bound=pydantic.BaseModel)


def return_one(object_id: int, repository: storage.Repository[_M]) -> _M:
    """
    Return the object of a given repository that's identified by its object ID

    :param object_id: internal ID of the model
    :param repository: repository holding all instances of the model
    :return: resulting entity as storage model
    :raises NotFound: when the specified object ID returned no result
    """

    try:
        return repository.find_by_id(object_id)
    except storage.EntityNotFound as exc:
        raise NotFound(str(exc)) from exc


def search_models(
        repository: storage.Repository[_M],
        convert: Callable[[_M], _S],
        limit: Optional[pydantic.NonNegativeInt] = None,
        page: Optional[pydantic.NonNegativeInt] = None,
        descending: Optional[bool] = False
) -> List[_S]:
    """
    Return the schemas of all models of the repository, optionally paginated

    :param repository: repository holding all instances of the model
    :param convert: function converting a model into the schema that should be returned
    :param limit: limit the number of total results
    :param page: select a page of results, based on the page size of `limit`; if no
        limit is given, the page will be ignored due to its missing size specification
    :param descending: reverse the order of results (ordered by ID)
    :return: list of schemas of all (selected) models
    """

    objects = repository.find_all()
    if descending:
        objects.reverse()
    results = [convert(obj) for obj in objects]
    if limit and page:
        return results[limit*page:limit*(page+1)]
    elif limit:
        return results[:limit]
    return results


def update_one(
        entity: _M,
        repository: storage.Repository[_M],
        merge: Optional[Callable[[_M, _M], _M]] = None
) -> _M:
    """
    Replace the stored instance of a model by the given entity with the same ID

    :param merge: optional function combining the stored and the new entity atomically
    :raises NotFound: when the ID of the entity is unknown
    """

    try:
        return repository.update(entity, merge)
    except storage.EntityNotFound as exc:
        raise NotFound(str(exc)) from exc


def delete_one_of_model(
        instance_id: pydantic.NonNegativeInt,
        repository: storage.Repository[_M],
        logger: Optional[logging.Logger] = None
) -> Response:
    """
    Delete the identified instance of a model from its repository

    :param instance_id: unique identifier of the instance to be deleted
    :param repository: repository holding all instances of the model
    :param logger: optional logger that should be used for DEBUG messages
    :raises NotFound: when the specified ID can't be found for the given model
    """

    obj = return_one(instance_id, repository)
    enforce_logger(logger).debug(f"Deleting model {obj!r}...")
    try:
        repository.delete(instance_id)
    except storage.EntityNotFound as exc:
        raise NotFound(str(exc)) from exc
    return Response(status_code=204)
