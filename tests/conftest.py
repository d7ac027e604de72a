"""Shared pytest fixtures."""

import pytest

from videoenhancer.document import PageDocument
from videoenhancer.presets import default_config
from videoenhancer.storage import MemoryStore


@pytest.fixture
def document():
    return PageDocument(ready=True)


@pytest.fixture
def loading_document():
    """A page whose body does not exist yet."""
    return PageDocument(ready=False)


@pytest.fixture
def store():
    return MemoryStore(default_config())
