"""Smoke test: full expense flow against a throwaway SQLite file.

Runs the real app factory with demo data seeded and a local identity-service
stand-in, then walks list / create / modify / delete through the HTTP surface.
"""

import json
import os
import sys
import tempfile
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

# Establish isolated temp directory and set env BEFORE importing settings
TEMP_DIR = tempfile.mkdtemp(prefix="expense_smoke_")
os.environ["DATA_DIR"] = TEMP_DIR
os.environ["DB_FILENAME"] = "smoke.sqlite3"
os.environ["SEED_DEMO_DATA"] = "true"

# Ensure project root on path when executed directly
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from fastapi.testclient import TestClient
from expense_svc.core.config import Settings
from expense_svc.main import create_app

USER, TOKEN = "test@test.co.uk", "1234567"


class IdentityHandler(BaseHTTPRequestHandler):
    def do_POST(self):  # noqa: N802
        length = int(self.headers.get("Content-Length", 0))
        body = json.loads(self.rfile.read(length) or b"{}")
        valid = body.get("userId") == USER and body.get("token") == TOKEN
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps({"valid": valid}).encode("utf-8"))

    def log_message(self, format, *args):
        pass


identity = HTTPServer(("127.0.0.1", 0), IdentityHandler)
threading.Thread(target=identity.serve_forever, daemon=True).start()
os.environ["AUTH_SERVICE_URL"] = "http://127.0.0.1:%d" % identity.server_address[1]

settings = Settings()
settings.init_post_load()
client = TestClient(create_app(settings_override=settings))
headers = {"auth_id": USER, "auth_token": TOKEN}

all_resp = client.get("/expense/list", headers=headers).json()
jan = client.get("/expense/list?month=2019-01", headers=headers).json()
may = client.get("/expense/list?month=2019-5", headers=headers).json()
bad = client.get("/expense/list?month=2019-13", headers=headers)
denied = client.get("/expense/list", headers={"auth_id": USER, "auth_token": "x"})
print("ALL count", len(all_resp))
print("JAN count", len(jan), "locations", sorted(e["location"] for e in jan))
print("MAY count", len(may))
print("BAD month status", bad.status_code)
print("DENIED status", denied.status_code)

created = client.post(
    "/expense/create",
    json={"location": "Diner", "amount": 5000, "date": "2020-08-19", "category": "EATOUT"},
    headers=headers,
).json()
aug = client.get("/expense/list?month=2020-08", headers=headers).json()
print("CREATED", created)

modified = client.post(
    "/expense/modify", json=dict(created, location="Diner (late)"), headers=headers
).json()
print("MODIFIED", modified)

deleted = client.get("/expense/delete", params={"id": created["id"]}, headers=headers)
after = client.get("/expense/list", headers=headers).json()
print("AFTER DELETE count", len(after))

identity.shutdown()

assert len(all_resp) == 6, f"expected 6 expenses got {len(all_resp)}"
assert len(jan) == 3, f"expected 3 January expenses got {len(jan)}"
assert may == [], "May 2019 should be empty"
assert bad.status_code == 400
assert denied.status_code == 401
assert created in aug, "created expense missing from its month"
assert modified["location"] == "Diner (late)" and modified["id"] == created["id"]
assert deleted.status_code == 200
assert len(after) == 6, "delete should restore the original set"
print("Expense flow smoke test: PASS")
