import pytest

from farm_records import create_app
from farm_records.extensions import db
from farm_records.memory import MemoryStorage
from farm_records.storage import DatabaseStorage


# The app context is only pushed around setup and teardown: each test client
# request then gets a fresh context, so the logged-in user cached on `g` does
# not leak from one request into the next.
@pytest.fixture
def app():
    app = create_app('test')
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def memory_app():
    return create_app('test', storage=MemoryStorage())


@pytest.fixture
def memory_client(memory_app):
    return memory_app.test_client()


@pytest.fixture(params=['database', 'memory'])
def storage(request, app):
    """Both storage implementations, run against the same contract tests."""
    if request.param == 'memory':
        yield MemoryStorage()
        return
    with app.app_context():
        yield DatabaseStorage()
