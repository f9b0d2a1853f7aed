"""
In-memory storage of the models

Every model class owns one ``Repository``, which keeps the records in a
dictionary and synthesizes identifiers from a monotonically increasing
counter. Both are guarded by a lock, so concurrent requests may create
records without ever receiving the same identifier twice.
"""

import copy
import datetime
import itertools
import logging
import threading
from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

from . import models


ModelType = TypeVar("ModelType", bound=models.Base)

MOCK_LAUNCH_DATE: datetime.date = datetime.date(2017, 1, 1)

_repositories: Optional[Dict[Type[models.Base], "Repository"]] = None
_logger: logging.Logger = logging.getLogger(__name__)


class EntityNotFound(KeyError):
    """
    Exception raised when no record exists for the requested identifier
    """

    def __init__(self, model: Type[models.Base], entity_id: int):
        super().__init__(entity_id)
        self.model = model
        self.entity_id = entity_id

    def __str__(self) -> str:
        return f"{self.model.__name__} with ID {self.entity_id!r}"


class Repository(Generic[ModelType]):
    """
    Thread-safe collection of all records of one model class

    The repository only hands out copies of the stored records,
    so callers can't change the stored state without ``update``.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self._records: Dict[int, ModelType] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def find_all(self) -> List[ModelType]:
        with self._lock:
            return [copy.copy(self._records[k]) for k in sorted(self._records)]

    def find_by_id(self, entity_id: int) -> ModelType:
        with self._lock:
            if entity_id not in self._records:
                raise EntityNotFound(self.model, entity_id)
            return copy.copy(self._records[entity_id])

    def create(self, entity: ModelType) -> ModelType:
        if not isinstance(entity, self.model):
            raise TypeError(f"Expected {self.model.__name__}, got {type(entity)!r}")
        entity = copy.copy(entity)
        with self._lock:
            entity.id = next(self._counter)
            self._records[entity.id] = entity
        return copy.copy(entity)

    def update(
            self,
            entity: ModelType,
            merge: Optional[Callable[[ModelType, ModelType], ModelType]] = None
    ) -> ModelType:
        """
        Replace the stored record with the same ID by the given entity

        The optional ``merge`` function is called with copies of the stored
        record and the given entity while the repository is locked. Its
        result is stored instead, keeping the ID of the given entity.
        """

        if not isinstance(entity, self.model):
            raise TypeError(f"Expected {self.model.__name__}, got {type(entity)!r}")
        entity_id = entity.id
        with self._lock:
            if entity_id not in self._records:
                raise EntityNotFound(self.model, entity_id)
            if merge is not None:
                entity = merge(copy.copy(self._records[entity_id]), copy.copy(entity))
                if not isinstance(entity, self.model):
                    raise TypeError(f"Expected {self.model.__name__}, got {type(entity)!r}")
                entity.id = entity_id
            self._records[entity_id] = copy.copy(entity)
        return copy.copy(entity)

    def delete(self, entity_id: int):
        with self._lock:
            if entity_id not in self._records:
                raise EntityNotFound(self.model, entity_id)
            del self._records[entity_id]

    def clear(self):
        with self._lock:
            self._records.clear()


def make_mock_person(number: int) -> models.Person:
    return models.Person(
        first_name=f"Person name {number}",
        last_name=f"Last name {number}",
        address="Some address in Brazil",
        gender="Male" if number % 2 else "Female"
    )


def make_mock_book(number: int) -> models.Book:
    return models.Book(
        author=f"Author {number}",
        launch_date=MOCK_LAUNCH_DATE + datetime.timedelta(days=number),
        price=10.0 * number,
        title=f"Book title {number}"
    )


def init(mock_people: int = 0, mock_books: int = 0):
    """
    Initialize fresh and empty repositories for all known models

    This function should be called at a very early program stage, before
    any part of it tries to access the storage. If this isn't done, empty
    repositories will be created on first access, but a warning will be
    emitted once. Calling it again drops all previously stored records.

    :param mock_people: number of generated people to store initially
    :param mock_books: number of generated books to store initially
    """

    global _repositories
    _repositories = {
        models.Person: Repository(models.Person),
        models.Book: Repository(models.Book)
    }
    for i in range(1, mock_people + 1):
        _repositories[models.Person].create(make_mock_person(i))
    for i in range(1, mock_books + 1):
        _repositories[models.Book].create(make_mock_book(i))
    if mock_people or mock_books:
        _logger.info(f"Stored {mock_people} mock people and {mock_books} mock books")


def get_repository(model: Type[ModelType]) -> Repository[ModelType]:
    if _repositories is None:
        _logger.warning(
            "Storage not initialized! Using empty repositories. Call 'init' "
            "once at program startup to suppress this warning."
        )
        init()
    if model not in _repositories:
        raise TypeError(f"No repository for {model!r}")
    return _repositories[model]
