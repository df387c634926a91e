import pytest

from fakes import ABSENT, World, make_record


@pytest.fixture
def world():
    return World(records=[make_record(100), make_record(101, status_id=ABSENT, version=3)])
