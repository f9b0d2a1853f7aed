"""
Router module for /api/book requests
"""

import logging
from typing import List, Optional

import pydantic
from fastapi import APIRouter, Depends

from ..base import NegotiatingRoute
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import mapper
from ... import schemas


logger = logging.getLogger(__name__)

router = APIRouter(
    route_class=NegotiatingRoute,
    tags=["Books"],
    responses={k: {"model": schemas.APIError} for k in (400, 406)}
)


@router.get("", response_model=List[schemas.Book])
@versioning.versions(1)
async def find_all_books(
        limit: Optional[pydantic.NonNegativeInt] = None,
        page: Optional[pydantic.NonNegativeInt] = None,
        descending: Optional[bool] = False,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return all books, ordered by their ID
    """

    logger.info("Finding all books!")
    return helpers.search_models(local.books, mapper.entity_to_book, limit, page, descending)


@router.get(
    "/{book_id}",
    response_model=schemas.Book,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(1)
async def find_book_by_id(book_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return the book identified by the given ID

    * `404`: if the book ID is unknown
    """

    logger.info("Finding one Book!")
    return mapper.entity_to_book(helpers.return_one(book_id, local.books))


@router.post("", status_code=201, response_model=schemas.Book)
@versioning.versions(1)
async def create_book(body: schemas.BookCreation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Create a new book

    The body can be sent as JSON, XML or YAML document.
    """

    logger.info("Creating one Book!")
    return mapper.entity_to_book(local.books.create(mapper.book_to_entity(body)))


@router.put(
    "",
    response_model=schemas.Book,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(1)
async def update_book(body: schemas.BookUpdate, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Replace the book identified by the ID in the body

    * `404`: if the book ID is unknown
    """

    logger.info("Updating one Book!")
    return mapper.entity_to_book(helpers.update_one(mapper.book_to_entity(body), local.books))


@router.delete(
    "/{book_id}",
    status_code=204,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(1)
async def delete_book(book_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Delete the book identified by the given ID

    * `404`: if the book ID is unknown
    """

    logger.info("Deleting one Book!")
    return helpers.delete_one_of_model(book_id, local.books, logger)
