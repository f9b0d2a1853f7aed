"""
Router module for /api/person requests
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
    tags=["People"],
    responses={k: {"model": schemas.APIError} for k in (400, 406)}
)


@router.get("", response_model=List[schemas.Person])
@versioning.versions(1)
async def find_all_people(
        limit: Optional[pydantic.NonNegativeInt] = None,
        page: Optional[pydantic.NonNegativeInt] = None,
        descending: Optional[bool] = False,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return all people, ordered by their ID
    """

    logger.info("Finding all people!")
    return helpers.search_models(local.people, mapper.entity_to_person, limit, page, descending)


@router.get("", response_model=List[schemas.PersonV2])
@versioning.versions(2)
async def find_all_people_v2(
        limit: Optional[pydantic.NonNegativeInt] = None,
        page: Optional[pydantic.NonNegativeInt] = None,
        descending: Optional[bool] = False,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return all people including their birth day, ordered by their ID
    """

    logger.info("Finding all people!")
    return helpers.search_models(local.people, mapper.entity_to_person_v2, limit, page, descending)


@router.get(
    "/{person_id}",
    response_model=schemas.Person,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(1)
async def find_person_by_id(person_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return the person identified by the given ID

    * `404`: if the person ID is unknown
    """

    logger.info("Finding one Person!")
    return mapper.entity_to_person(helpers.return_one(person_id, local.people))


@router.get(
    "/{person_id}",
    response_model=schemas.PersonV2,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(2)
async def find_person_by_id_v2(person_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return the person identified by the given ID including the birth day

    * `404`: if the person ID is unknown
    """

    logger.info("Finding one Person!")
    return mapper.entity_to_person_v2(helpers.return_one(person_id, local.people))


@router.post("", status_code=201, response_model=schemas.Person)
@versioning.versions(1)
async def create_person(body: schemas.PersonCreation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Create a new person (without birth day)

    The body can be sent as JSON, XML or YAML document.
    """

    logger.info("Creating one Person!")
    return mapper.entity_to_person(local.people.create(mapper.person_to_entity(body)))


@router.post("", status_code=201, response_model=schemas.PersonV2)
@versioning.versions(2)
async def create_person_v2(body: schemas.PersonV2Creation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Create a new person with an optional birth day

    The body can be sent as JSON, XML or YAML document.
    """

    logger.info("Creating one Person with V2!")
    return mapper.entity_to_person_v2(local.people.create(mapper.person_to_entity(body)))


@router.put(
    "",
    response_model=schemas.Person,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(1)
async def update_person(body: schemas.PersonUpdate, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Replace the person identified by the ID in the body

    The stored birth day is kept, since this API version doesn't know it.

    * `404`: if the person ID is unknown
    """

    logger.info("Updating one Person!")
    return mapper.entity_to_person(helpers.update_one(
        mapper.person_to_entity(body),
        local.people,
        merge=lambda stored, _: mapper.person_to_entity(body, stored)
    ))


@router.put(
    "",
    response_model=schemas.PersonV2,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(2)
async def update_person_v2(body: schemas.PersonV2Update, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Replace the person identified by the ID in the body, including the birth day

    * `404`: if the person ID is unknown
    """

    logger.info("Updating one Person with V2!")
    return mapper.entity_to_person_v2(helpers.update_one(mapper.person_to_entity(body), local.people))


@router.delete(
    "/{person_id}",
    status_code=204,
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(minimal=1)
async def delete_person(person_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Delete the person identified by the given ID

    * `404`: if the person ID is unknown
    """

    logger.info("Deleting one Person!")
    return helpers.delete_one_of_model(person_id, local.people, logger)
