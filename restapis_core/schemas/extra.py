"""
Extra schemas

This module contains the special schemas for the version listing.
"""

from typing import List

import pydantic


class Versions(pydantic.BaseModel):
    class Version(pydantic.BaseModel):
        version: pydantic.PositiveInt
        prefix: pydantic.constr(min_length=2)

    latest: pydantic.PositiveInt
    versions: List[Version]
