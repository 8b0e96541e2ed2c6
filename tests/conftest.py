"""
Shared fixtures.

The services talk to Postgres through the functions in ``scratchcard.models``;
``store`` swaps those for an in-memory table set so the business rules can be
exercised without a database. Constraint behaviour the SQL relies on (unique
code strings, one prize per code, one claim per verification, the conditional
``unClaimed -> claimed`` update) is mirrored here.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from flask_jwt_extended import create_access_token

from scratchcard import create_app
from scratchcard.services import (
    auth_service,
    claim_service,
    code_service,
    prize_service,
)


def _id():
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


class FakeCursor:
    def __init__(self):
        self.execute = MagicMock()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeConnection:
    def __init__(self):
        self.commits = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor()

    def commit(self):
        self.commits += 1


class FakeStore:
    """In-memory stand-in for the codes / prizes / claims tables."""

    def __init__(self):
        self.codes = {}
        self.verified = {}
        self.definitions = {}
        self.prizes = {}
        self.claimables = {}
        self.admin = None
        self.connections = []

    # connection

    def connect(self):
        conn = FakeConnection()
        self.connections.append(conn)
        return conn

    @property
    def commits(self):
        return sum(c.commits for c in self.connections)

    # helpers used by tests to arrange state

    def add_code(self, code, is_valid=True):
        code_id = _id()
        self.codes[code_id] = {
            "id": code_id,
            "code": code,
            "isValid": is_valid,
            "created_at": _now(),
        }
        return code_id

    def add_definition(self, prize_name="Gold", requires_cnic=False, description=""):
        def_id = _id()
        self.definitions[def_id] = {
            "id": def_id,
            "prize_name": prize_name,
            "description": description,
            "requires_cnic": requires_cnic,
            "created_at": _now(),
            "updated_at": _now(),
        }
        return def_id

    def add_prize(self, code_id, definition_id):
        prize_id, _ = self.upsert_prize(
            None, code_id=code_id, prize_definition_id=definition_id
        )
        return prize_id

    def add_verification(self, code_id, name="Ali", phone="03001234567"):
        return self.insert_verified_code(None, code_id=code_id, name=name, phone=phone)

    # codes

    def get_code_by_string(self, cur, code):
        for row in self.codes.values():
            if row["code"] == code:
                return dict(row)
        return None

    def get_code(self, cur, code_id):
        row = self.codes.get(code_id)
        return dict(row) if row else None

    def insert_code_if_absent(self, cur, code):
        if self.get_code_by_string(cur, code):
            return None
        return self.add_code(code)

    def set_code_invalid(self, cur, code_id):
        if code_id in self.codes:
            self.codes[code_id]["isValid"] = False

    def update_code(self, cur, code_id, code, is_valid=None):
        row = self.codes.get(code_id)
        if not row:
            return None
        row["code"] = code
        if is_valid is not None:
            row["isValid"] = is_valid
        return dict(row)

    def delete_code(self, cur, code_id):
        return self.codes.pop(code_id, None) is not None

    def list_codes(self, cur, limit=None):
        rows = []
        for row in self.codes.values():
            first = self.get_first_verification_for_code(cur, row["id"])
            rows.append(
                {
                    "id": row["id"],
                    "code": row["code"],
                    "isValid": row["isValid"],
                    "verified": first is not None,
                    "verifiedDetails": (
                        {"name": first["name"], "phone": first["phone"]}
                        if first
                        else None
                    ),
                    "prizeName": None,
                }
            )
        return rows[:limit] if limit else rows

    # verification ledger

    def insert_verified_code(self, cur, *, code_id, name, phone):
        vid = _id()
        self.verified[vid] = {
            "id": vid,
            "code_id": code_id,
            "name": name,
            "phone": phone,
            "created_at": _now(),
        }
        return vid

    def get_verified_code(self, cur, verified_code_id):
        row = self.verified.get(verified_code_id)
        return dict(row) if row else None

    def get_first_verification_for_code(self, cur, code_id):
        rows = [v for v in self.verified.values() if v["code_id"] == code_id]
        return dict(rows[0]) if rows else None

    def delete_verifications_for_code(self, cur, code_id):
        doomed = [k for k, v in self.verified.items() if v["code_id"] == code_id]
        for k in doomed:
            del self.verified[k]
        return len(doomed)

    def list_verified_codes(self, cur):
        return [dict(v) for v in self.verified.values()]

    # prize catalog

    def create_prize_definition(self, cur, *, prize_name, description, requires_cnic):
        def_id = self.add_definition(prize_name, requires_cnic, description)
        return dict(self.definitions[def_id])

    def get_prize_definition(self, cur, definition_id):
        row = self.definitions.get(definition_id)
        return dict(row) if row else None

    def list_prize_definitions(self, cur):
        return [dict(d) for d in self.definitions.values()]

    def update_prize_definition(self, cur, definition_id, **fields):
        row = self.definitions.get(definition_id)
        if not row:
            return None
        row.update(fields)
        row["updated_at"] = _now()
        return dict(row)

    def delete_prize_definition(self, cur, definition_id):
        return self.definitions.pop(definition_id, None) is not None

    # prize assignment

    def get_prize_by_code(self, cur, code_id):
        for row in self.prizes.values():
            if row["code_id"] == code_id:
                return dict(row)
        return None

    def upsert_prize(self, cur, *, code_id, prize_definition_id):
        existing = self.get_prize_by_code(cur, code_id)
        if existing:
            self.prizes[existing["id"]]["prize_definition_id"] = prize_definition_id
            return existing["id"], False
        prize_id = _id()
        self.prizes[prize_id] = {
            "id": prize_id,
            "code_id": code_id,
            "prize_definition_id": prize_definition_id,
        }
        return prize_id, True

    def delete_prize_by_code(self, cur, code_id):
        existing = self.get_prize_by_code(cur, code_id)
        if not existing:
            return False
        del self.prizes[existing["id"]]
        return True

    def definition_in_use(self, cur, prize_definition_id):
        return any(
            p["prize_definition_id"] == prize_definition_id for p in self.prizes.values()
        )

    def list_prizes(self, cur):
        return [dict(p) for p in self.prizes.values()]

    # claim queue

    def get_claimable_prize(self, cur, claimable_id):
        row = self.claimables.get(claimable_id)
        return dict(row) if row else None

    def get_claimable_by_verified_code(self, cur, verified_code_id):
        for row in self.claimables.values():
            if row["verified_code_id"] == verified_code_id:
                return dict(row)
        return None

    def claimable_exists_for_code(self, cur, code_id):
        return any(c["code_id"] == code_id for c in self.claimables.values())

    def insert_claimable_prize(
        self,
        cur,
        *,
        prize_id,
        code_id,
        verified_code_id,
        cnic_image_url=None,
        storage_key=None,
    ):
        if self.get_claimable_by_verified_code(cur, verified_code_id):
            return None
        cid = _id()
        self.claimables[cid] = {
            "id": cid,
            "prize_id": prize_id,
            "code_id": code_id,
            "verified_code_id": verified_code_id,
            "cnic_image_url": cnic_image_url,
            "storageId": storage_key,
            "status": "unClaimed",
            "claimed_at": None,
            "created_at": _now(),
        }
        return cid

    def mark_claimed(self, cur, claimable_id):
        row = self.claimables.get(claimable_id)
        if not row or row["status"] != "unClaimed":
            return None
        row["status"] = "claimed"
        row["claimed_at"] = _now()
        return dict(row)

    def delete_claimables_for_code(self, cur, code_id):
        doomed = [k for k, c in self.claimables.items() if c["code_id"] == code_id]
        for k in doomed:
            del self.claimables[k]
        return len(doomed)

    def list_claimable_prizes(self, cur):
        rows = []
        for c in self.claimables.values():
            v = self.verified.get(c["verified_code_id"])
            code = self.codes.get(c["code_id"])
            prize = self.prizes.get(c["prize_id"])
            definition = (
                self.definitions.get(prize["prize_definition_id"]) if prize else None
            )
            rows.append(
                {
                    "claimable_prize_id": c["id"],
                    "code": code["code"] if code else None,
                    "user": {"name": v["name"], "phone": v["phone"]} if v else None,
                    "prize_definition": (
                        {
                            "id": definition["id"],
                            "prize_name": definition["prize_name"],
                            "description": definition["description"],
                        }
                        if definition
                        else None
                    ),
                    "cnic_image_url": c["cnic_image_url"],
                    "status": c["status"],
                    "claimed_at": c["claimed_at"],
                    "created_at": c["created_at"],
                }
            )
        return rows

    # admin credentials

    def get_admin_credentials(self, cur):
        return dict(self.admin) if self.admin else None

    def save_admin_credentials(self, cur, username, password_hash):
        self.admin = {"id": _id(), "username": username, "password_hash": password_hash}
        return {"id": self.admin["id"], "username": username}


# names the services import model functions under, mapped to FakeStore methods
_MODEL_ALIASES = {
    "update_code_row": "update_code",
    "mark_claimed_row": "mark_claimed",
    "insert_prize_definition": "create_prize_definition",
    "delete_prize_definition_row": "delete_prize_definition",
    "update_prize_definition_row": "update_prize_definition",
}

_MODEL_NAMES = [
    "get_code_by_string",
    "get_code",
    "insert_code_if_absent",
    "set_code_invalid",
    "delete_code",
    "list_codes",
    "insert_verified_code",
    "get_verified_code",
    "get_first_verification_for_code",
    "delete_verifications_for_code",
    "list_verified_codes",
    "get_prize_definition",
    "list_prize_definitions",
    "get_prize_by_code",
    "upsert_prize",
    "delete_prize_by_code",
    "definition_in_use",
    "list_prizes",
    "get_claimable_prize",
    "get_claimable_by_verified_code",
    "claimable_exists_for_code",
    "insert_claimable_prize",
    "delete_claimables_for_code",
    "list_claimable_prizes",
    "get_admin_credentials",
    "save_admin_credentials",
]


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    names = {name: name for name in _MODEL_NAMES}
    names.update(_MODEL_ALIASES)
    for module in (code_service, claim_service, prize_service, auth_service):
        monkeypatch.setattr(module, "get_db_connection", fake.connect)
        for attr, method in names.items():
            if hasattr(module, attr):
                monkeypatch.setattr(module, attr, getattr(fake, method))
    return fake


@pytest.fixture
def admin_events(monkeypatch):
    """Socket notifications sent to the admin room."""
    sent = MagicMock()
    monkeypatch.setattr(claim_service, "notify_admins", sent)
    return sent


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "JWT_SECRET_KEY": "test-jwt-secret",
            "UPLOAD_TOKEN_SECRET": "test-upload-secret",
            "USE_IMPORT_QUEUE": False,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(app):
    with app.app_context():
        token = create_access_token(
            identity="admin", additional_claims={"role": "admin"}
        )
    return {"Authorization": f"Bearer {token}"}
