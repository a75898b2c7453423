"""
faultmap Testing - Pytest Fixtures.

Import the fixtures in your ``conftest.py`` to make them available::

    from faultmap.testing import repository, locator, event  # noqa: F401
"""

from __future__ import annotations

import pytest

from .core import Event
from .locator import ErrorTypeLocator, create_default_locator
from .taxonomy import ErrorTypeRepository, create_default_repository


@pytest.fixture
def repository() -> ErrorTypeRepository:
    """A fresh, unsealed repository holding the built-in taxonomy."""
    return create_default_repository()


@pytest.fixture
def locator(repository: ErrorTypeRepository) -> ErrorTypeLocator:
    """The default locator over ``repository``."""
    return create_default_locator(repository)


@pytest.fixture
def event() -> Event:
    """An event with no classification."""
    return Event(payload=None)
