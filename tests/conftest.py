"""
Shared test fixtures for the faultmap test suite.
"""

# Import fixtures so pytest can discover them
from faultmap.testing import (  # noqa: F401
    repository,
    locator,
    event,
)
