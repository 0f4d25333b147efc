"""Shared fixtures"""
import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kanvas.db.models import Base
from kanvas.elements.models import TableInfo


def sequential_ids(prefix: str = "el"):
    """Deterministic id factory: el-1, el-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def id_factory():
    return sequential_ids()


@pytest.fixture
def sales_tables():
    return (
        TableInfo.model_validate({
            "name": "sales",
            "structure": [
                {"Field": "id", "Type": "int(11)", "Null": "NO", "Key": "PRI", "Default": None, "Extra": "auto_increment"},
                {"Field": "amount", "Type": "decimal(10,2)", "Null": "YES", "Key": "", "Default": None, "Extra": ""},
            ],
        }),
        TableInfo(name="customers"),
    )


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()
