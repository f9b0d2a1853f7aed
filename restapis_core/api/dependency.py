"""
API dependency library
"""

from ..persistence import models, storage


class LocalRequestData:
    """
    Collection of core dependencies used by all path operations of resources

    This class stores references to various important objects that
    will almost certainly be used by request handlers (path operations).
    Note that any dependency added here will be added to the OpenAPI
    definition, if it refers to a Query, Header, Path or Cookie.
    """

    def __init__(self):
        self.people: storage.Repository[models.Person] = storage.get_repository(models.Person)
        self.books: storage.Repository[models.Book] = storage.get_repository(models.Book)
