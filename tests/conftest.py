import pytest

from selfinvest import create_app


@pytest.fixture
def app():
    return create_app({"TESTING": True, "API_KEY": ""})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api_key():
    return "test-secret"


@pytest.fixture
def authed_client(api_key):
    app = create_app({"TESTING": True, "API_KEY": api_key})
    return app.test_client()
