"""Shared fixtures over the fakes in tests/fakes.py."""

import pytest

from tests.fakes import FakeNotion, make_user


@pytest.fixture
def roster():
    return [
        make_user("u-1", "Jon Smith", email="jon@example.com"),
        make_user("u-2", "Jonathan Lee"),
        make_user("u-3", "Maria Garcia"),
        make_user("b-1", "Bug Bot", kind="bot"),
    ]


@pytest.fixture
def notion(roster):
    return FakeNotion(users=roster)

