"""
Schema definitions

Any schema has a base name and any of the following extended names:
 * ``Creation`` to create a new instance of that schema
 * ``Update`` to replace an existing instance of that schema
For example, there are three classes to represent books:
``Book``, ``BookCreation`` and ``BookUpdate``

Schemas carrying a version suffix, e.g. ``PersonV2``, belong to a
later API version and extend their unsuffixed counterparts.

This package also contains the ``config`` module, but it's not
exported by default, since it's currently only used internally.
"""

from .bases import *
from .errors import *
from .extra import *
