import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from student_registry.core.database import Base, create_session_factory, get_db
from student_registry.models.student import Student  # noqa: F401  registers the table


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    with get_db(session_factory) as session:
        yield session
