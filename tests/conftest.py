import pytest
from fastapi.testclient import TestClient

from chain_events.app import create_app
from chain_events.core.config import Settings
from chain_events.data.db import init_schema, make_engine, make_session_factory
from chain_events.data.event_store import EventStore
from chain_events.query.engine import EventQueryEngine


@pytest.fixture(scope="function")
def db_engine():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return make_session_factory(db_engine)


@pytest.fixture(scope="function")
def seed(session_factory):
    def _seed(*rows):
        with session_factory() as session:
            session.add_all(rows)
            session.commit()

    return _seed


@pytest.fixture(scope="function")
def store(session_factory):
    with session_factory() as session:
        yield EventStore(session)


@pytest.fixture(scope="function")
def query_engine(session_factory):
    return EventQueryEngine(session_factory)


@pytest.fixture(scope="function")
def client(query_engine):
    app = create_app(settings=Settings(database_url="sqlite://"), query_engine=query_engine)
    return TestClient(app)
