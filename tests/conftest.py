import pytest

from ingredient_utils.conversion import UnitConverter
from ingredient_utils.database import (
    InMemoryDirectory,
    MemoryDecisionLog,
    UnitDirectory,
    create_schema,
    get_connection,
)
from ingredient_utils.ingredients import IngredientMatcher


@pytest.fixture(scope="session")
def directory():
    return InMemoryDirectory.from_json()


@pytest.fixture
def decision_log():
    return MemoryDecisionLog()


@pytest.fixture
def matcher(directory, decision_log):
    return IngredientMatcher(directory, decision_log=decision_log)


@pytest.fixture(scope="session")
def units():
    return UnitDirectory()


@pytest.fixture
def converter(units):
    return UnitConverter(units)


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test_directory.db"
    conn = get_connection(path)
    create_schema(conn)
    conn.close()
    return path
