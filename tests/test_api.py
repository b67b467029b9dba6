"""End-to-end behaviour of the HTTP surface with a stub identity service."""

import pytest
from fastapi.testclient import TestClient

from expense_svc.core.errors import StoreUnavailableError
from expense_svc.db import InMemoryExpenseStore
from expense_svc.db.seed import DEMO_USER, OTHER_DEMO_USER
from expense_svc.main import create_app

from .conftest import OTHER_TOKEN, StubAuthenticator, auth_headers

DINER = {
    "location": "Diner",
    "amount": 5000.0,
    "date": "2020-08-19",
    "category": "EATOUT",
    "userId": DEMO_USER,
}


# Authentication ---------------------------------------------------


@pytest.mark.parametrize(
    "headers",
    [{}, {"auth_id": DEMO_USER}, {"auth_token": "1234567"}],
)
def test_missing_credentials_401_without_identity_call(client, authenticator, headers):
    resp = client.get("/expense/list", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"] == "unauthorized"
    assert authenticator.calls == []


def test_denied_credentials_401(client):
    resp = client.get("/expense/list", headers=auth_headers(token="nope"))
    assert resp.status_code == 401


def test_auth_runs_before_body_validation(client):
    resp = client.post("/expense/create", json={"category": "NOT_A_CATEGORY"})
    assert resp.status_code == 401


def test_credentials_accepted_from_cookies(client):
    cookie = f"auth_id={DEMO_USER}; auth_token=1234567"
    resp = client.get("/expense/list", headers={"Cookie": cookie})
    assert resp.status_code == 200
    assert len(resp.json()) == 6


def test_each_request_validated_afresh(client, authenticator):
    client.get("/expense/list", headers=auth_headers())
    client.get("/expense/list", headers=auth_headers())
    assert len(authenticator.calls) == 2


# List -------------------------------------------------------------


def test_list_without_month_returns_all_own(client):
    resp = client.get("/expense/list", headers=auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 6
    assert {e["userId"] for e in body} == {DEMO_USER}


def test_list_january_2019(client):
    resp = client.get("/expense/list", params={"month": "2019-01"}, headers=auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 3
    expected = [
        {"id": 1, "location": "Papa Johns", "amount": 2500.0, "date": "2019-01-12", "category": "EATOUT", "userId": DEMO_USER},
        {"id": 2, "location": "Starbucks", "amount": 1200.0, "date": "2019-01-12", "category": "CAFE", "userId": DEMO_USER},
        {"id": 3, "location": "Electric Co.", "amount": 22500.0, "date": "2019-01-12", "category": "UTILITIES", "userId": DEMO_USER},
    ]
    for item in expected:
        assert item in body


def test_list_month_without_expenses_is_empty_200(client):
    resp = client.get("/expense/list?month=2019-5", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.parametrize("month", ["2019-13", "2019-0", "abcd-01", "2019"])
def test_list_invalid_month_400(client, month):
    resp = client.get("/expense/list", params={"month": month}, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"


def test_other_user_sees_only_their_expenses(client):
    resp = client.get("/expense/list", headers=auth_headers(OTHER_DEMO_USER, OTHER_TOKEN))
    assert [e["location"] for e in resp.json()] == ["Nandos"]


# Create / delete ----------------------------------------------------


def test_create_then_list_then_delete(client):
    headers = auth_headers()
    created = client.post("/expense/create", json=DINER, headers=headers)
    assert created.status_code == 200
    expense = created.json()
    assert isinstance(expense["id"], int)

    listed = client.get("/expense/list?month=2020-08", headers=headers).json()
    assert expense in listed

    deleted = client.get("/expense/delete", params={"id": expense["id"]}, headers=headers)
    assert deleted.status_code == 200

    listed = client.get("/expense/list", headers=headers).json()
    assert expense["id"] not in {e["id"] for e in listed}
    assert len(listed) == 6


def test_create_ignores_supplied_owner(client):
    body = dict(DINER, userId=OTHER_DEMO_USER)
    created = client.post("/expense/create", json=body, headers=auth_headers())
    assert created.status_code == 200
    assert created.json()["userId"] == DEMO_USER
    theirs = client.get("/expense/list", headers=auth_headers(OTHER_DEMO_USER, OTHER_TOKEN)).json()
    assert created.json()["id"] not in {e["id"] for e in theirs}


def test_create_zero_amount_is_valid(client):
    resp = client.post("/expense/create", json=dict(DINER, amount=0), headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json()["amount"] == 0


@pytest.mark.parametrize(
    "change",
    [
        {"location": ""},
        {"location": "   "},
        {"amount": None},
        {"date": "2020-13-01"},
        {"category": "GAMBLING"},
    ],
)
def test_create_invalid_body_400(client, change):
    resp = client.post("/expense/create", json=dict(DINER, **change), headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"


@pytest.mark.parametrize("field", ["location", "amount", "date", "category"])
def test_create_missing_field_400(client, field):
    body = {k: v for k, v in DINER.items() if k != field}
    resp = client.post("/expense/create", json=body, headers=auth_headers())
    assert resp.status_code == 400


@pytest.mark.parametrize("params", [{"id": 5400}, {"id": 7}, {}, {"id": "abc"}])
def test_delete_unknown_foreign_or_missing_id_400(client, params):
    resp = client.get("/expense/delete", params=params, headers=auth_headers())
    assert resp.status_code == 400
    listed = client.get("/expense/list", headers=auth_headers()).json()
    assert len(listed) == 6


# Modify -----------------------------------------------------------


def test_modify_existing(client):
    modified = {
        "id": 5,
        "location": "Spar",
        "amount": 55000.0,
        "category": "UTILITIES",
        "date": "2019-09-12",
        "userId": DEMO_USER,
    }
    resp = client.post("/expense/modify", json=modified, headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == modified
    listed = client.get("/expense/list", headers=auth_headers()).json()
    assert modified in listed


def test_modify_unknown_400_and_no_change(client):
    missing = {
        "id": 5400,
        "location": "Electric Co.",
        "amount": 55000.0,
        "category": "UTILITIES",
        "date": "2019-01-12",
        "userId": DEMO_USER,
    }
    resp = client.post("/expense/modify", json=missing, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json() == {"error": "not_found", "detail": "expense not found"}
    listed = client.get("/expense/list", headers=auth_headers()).json()
    assert missing not in listed


def test_modify_foreign_looks_like_unknown(client):
    foreign = {
        "id": 7,
        "location": "Hijack",
        "amount": 1.0,
        "category": "EATOUT",
        "date": "2019-01-20",
    }
    resp = client.post("/expense/modify", json=foreign, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json() == {"error": "not_found", "detail": "expense not found"}
    theirs = client.get("/expense/list", headers=auth_headers(OTHER_DEMO_USER, OTHER_TOKEN)).json()
    assert theirs[0]["location"] == "Nandos"


def test_modify_without_id_400(client):
    resp = client.post("/expense/modify", json=DINER, headers=auth_headers())
    assert resp.status_code == 400


# Misc -------------------------------------------------------------


def test_store_failure_is_500(settings):
    class BrokenStore(InMemoryExpenseStore):
        def query(self, owner, month=None):
            raise StoreUnavailableError("expense store unavailable")

    app = create_app(settings, store=BrokenStore(), authenticator=StubAuthenticator())
    with TestClient(app) as c:
        resp = c.get("/expense/list", headers=auth_headers())
    assert resp.status_code == 500
    assert resp.json()["error"] == "store_unavailable"


def test_health_and_request_id(client):
    resp = client.get("/health", headers={"x-request-id": "abc-123"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["x-request-id"] == "abc-123"


def test_unknown_route_404(client):
    resp = client.get("/expense/nope", headers=auth_headers())
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


@pytest.mark.parametrize("month", ["9999-12", "0001-01"])
def test_list_calendar_edge_months_empty_200(client, month):
    resp = client.get("/expense/list", params={"month": month}, headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_last_representable_month_finds_its_expenses(client):
    body = dict(DINER, date="9999-12-31")
    created = client.post("/expense/create", json=body, headers=auth_headers()).json()
    resp = client.get("/expense/list", params={"month": "9999-12"}, headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == [created]


def test_delete_id_beyond_row_id_range_400(client):
    resp = client.get("/expense/delete", params={"id": 2**70}, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json() == {"error": "not_found", "detail": "expense not found"}


def test_modify_id_beyond_row_id_range_400(client):
    body = dict(DINER, id=2**70)
    resp = client.post("/expense/modify", json=body, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json() == {"error": "not_found", "detail": "expense not found"}
    listed = client.get("/expense/list", headers=auth_headers()).json()
    assert len(listed) == 6
