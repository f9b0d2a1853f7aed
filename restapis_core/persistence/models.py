"""
Core storage models

The models are the persistence-facing shapes of the resources. They are
never sent to clients directly; see ``misc.mapper`` for the conversion
into the versioned schemas.
"""

import datetime
import dataclasses
from typing import Optional


@dataclasses.dataclass
class Base:
    id: Optional[int] = None
    """Unique identifier assigned by the storage when the model is created"""


@dataclasses.dataclass
class Person(Base):
    """
    Model representing one person in the address book
    """

    first_name: str = ""
    last_name: str = ""
    address: str = ""
    gender: str = ""
    birth_day: Optional[datetime.date] = None


@dataclasses.dataclass
class Book(Base):
    """
    Model representing one book of the catalogue
    """

    author: str = ""
    launch_date: Optional[datetime.date] = None
    price: float = 0.0
    title: str = ""
