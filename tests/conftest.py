"""Shared fixtures.

No test talks to a real identity service: the app is built with a stub
authenticator that accepts a fixed set of credential pairs and records every
call it receives.
"""

import pytest
from fastapi.testclient import TestClient

from expense_svc.core.config import Settings
from expense_svc.db import Database, InMemoryExpenseStore
from expense_svc.db.schema import init_db
from expense_svc.db.seed import DEMO_USER, OTHER_DEMO_USER, seed_demo_expenses
from expense_svc.main import create_app
from expense_svc.services.auth import Authenticator

DEMO_TOKEN = "1234567"
OTHER_TOKEN = "7654321"


class StubAuthenticator(Authenticator):
    def __init__(self, valid=None):
        self.valid = dict(valid or {DEMO_USER: DEMO_TOKEN, OTHER_DEMO_USER: OTHER_TOKEN})
        self.calls = []

    def verify(self, identity_token, secret_token):
        self.calls.append((identity_token, secret_token))
        return self.valid.get(identity_token) == secret_token


def auth_headers(user=DEMO_USER, token=DEMO_TOKEN):
    return {"auth_id": user, "auth_token": token}


@pytest.fixture
def authenticator():
    return StubAuthenticator()


@pytest.fixture
def memory_store():
    store = InMemoryExpenseStore()
    seed_demo_expenses(store)
    return store


@pytest.fixture
def sqlite_store(tmp_path):
    db_path = tmp_path / "expenses.sqlite3"
    init_db(db_path)
    store = Database(db_path)
    seed_demo_expenses(store)
    return store


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, expense_store="memory", debug=False)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, memory_store, sqlite_store):
    return memory_store if request.param == "memory" else sqlite_store


@pytest.fixture
def client(settings, store, authenticator):
    app = create_app(settings, store=store, authenticator=authenticator)
    with TestClient(app) as c:
        yield c
