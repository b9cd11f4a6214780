import pytest

from stockpile import Factory, push_current_factory


@pytest.fixture
def factory():
    """An isolated factory with its own empty store."""
    return Factory()


@pytest.fixture
def active_factory(factory):
    """Make ``factory`` the current factory for the duration of a test."""
    with push_current_factory(factory):
        yield factory
