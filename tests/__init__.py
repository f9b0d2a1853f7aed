"""
REST APIs core unit tests
"""

import unittest
from .api import BookAPITests, GenericAPITests, MathAPITests, NegotiationAPITests, PeopleAPITests
from .cli import StandaloneCLITests
from .misc import (
    AppFactoryTests,
    BaseTests,
    ConverterTests,
    LoggerTests,
    NegotiationTests,
    SchemaTests,
    SettingsTests,
    SimpleMathTests,
    VersioningTests
)
from .persistence import MapperTests, RepositoryTests, StorageInitTests


TEST_CLASSES = [
    AppFactoryTests,
    BaseTests,
    BookAPITests,
    ConverterTests,
    GenericAPITests,
    LoggerTests,
    MapperTests,
    MathAPITests,
    NegotiationAPITests,
    NegotiationTests,
    PeopleAPITests,
    RepositoryTests,
    SchemaTests,
    SettingsTests,
    SimpleMathTests,
    StandaloneCLITests,
    StorageInitTests,
    VersioningTests,
]


def get_suite() -> unittest.TestSuite:
    suite = unittest.TestSuite()
    for cls in TEST_CLASSES:
        for fixture in filter(lambda f: f.startswith("test_"), dir(cls)):
            suite.addTest(cls(fixture))
    return suite
