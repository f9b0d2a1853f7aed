"""
Conversion between storage models and the versioned schemas

Field names are identical on both sides, so the conversions only differ
in the set of fields they copy. The first API version doesn't know the
birth day of people at all, while the second version transports it.
"""

from typing import Callable, Iterable, List, Optional, TypeVar, Union

from .. import schemas
from ..persistence import models


_S = TypeVar("_S")
_T = TypeVar("_T")

PersonBody = Union[
    schemas.PersonCreation,
    schemas.PersonUpdate,
    schemas.PersonV2Creation,
    schemas.PersonV2Update
]
BookBody = Union[schemas.BookCreation, schemas.BookUpdate]


def parse_list(objects: Iterable[_S], func: Callable[[_S], _T]) -> List[_T]:
    return [func(obj) for obj in objects]


def entity_to_person(person: models.Person) -> schemas.Person:
    return schemas.Person(
        id=person.id,
        first_name=person.first_name,
        last_name=person.last_name,
        address=person.address,
        gender=person.gender
    )


def entity_to_person_v2(person: models.Person) -> schemas.PersonV2:
    return schemas.PersonV2(
        id=person.id,
        first_name=person.first_name,
        last_name=person.last_name,
        address=person.address,
        gender=person.gender,
        birth_day=person.birth_day
    )


def person_to_entity(person: PersonBody, stored: Optional[models.Person] = None) -> models.Person:
    """
    Convert a person schema of any API version into a storage model

    Bodies of the first API version carry no birth day. If ``stored``
    is given (i.e. when updating an existing record), its birth day
    is kept instead of being erased by such a body.
    """

    birth_day = getattr(person, "birth_day", None)
    if not isinstance(person, (schemas.PersonV2Creation, schemas.PersonV2Update)) and stored is not None:
        birth_day = stored.birth_day
    return models.Person(
        id=getattr(person, "id", None),
        first_name=person.first_name,
        last_name=person.last_name,
        address=person.address,
        gender=person.gender,
        birth_day=birth_day
    )


def entity_to_book(book: models.Book) -> schemas.Book:
    return schemas.Book(
        id=book.id,
        author=book.author,
        launch_date=book.launch_date,
        price=book.price,
        title=book.title
    )


def book_to_entity(book: BookBody) -> models.Book:
    return models.Book(
        id=getattr(book, "id", None),
        author=book.author,
        launch_date=book.launch_date,
        price=book.price,
        title=book.title
    )
