"""
Router modules for handling requests to various endpoints

The resource routers ``people`` and ``books`` carry version annotations
and must be added to a ``VersionedFastAPI`` via ``add_router``, while
the ``calculator`` and ``generic`` routers are not versioned at all.
"""

from . import books, calculator, generic, people
