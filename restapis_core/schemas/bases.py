"""
Schemas for the base system

This module contains the data transfer objects for people (in two API
versions, where the second one adds the birth day) and for books.
"""

import datetime
from typing import Optional

import pydantic


_PRINTABLE = r"^[^\x00-\x08\x0B\x0C\x0E-\x1F]*$"

_Name = pydantic.constr(min_length=1, max_length=80, pattern=_PRINTABLE)
_Text = pydantic.constr(min_length=1, max_length=255, pattern=_PRINTABLE)
_Price = pydantic.confloat(ge=0, allow_inf_nan=False)


class Person(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    first_name: _Name
    last_name: _Name
    address: _Text
    gender: _Text


class PersonCreation(pydantic.BaseModel):
    first_name: _Name
    last_name: _Name
    address: _Text
    gender: _Text


class PersonUpdate(PersonCreation):
    id: pydantic.NonNegativeInt


class PersonV2(Person):
    birth_day: Optional[datetime.date] = None


class PersonV2Creation(PersonCreation):
    birth_day: Optional[datetime.date] = None


class PersonV2Update(PersonV2Creation):
    id: pydantic.NonNegativeInt


class Book(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    author: _Text
    launch_date: datetime.date
    price: _Price
    title: _Text


class BookCreation(pydantic.BaseModel):
    author: _Text
    launch_date: datetime.date
    price: _Price
    title: _Text


class BookUpdate(BookCreation):
    id: pydantic.NonNegativeInt
