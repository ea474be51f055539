"""
Shared fixtures: an in-memory MongoDB (mongomock) swapped into the
connection module, plus helpers for users, tokens and experiences.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_portal.core.auth import create_access_token, identity_from_doc
from placement_portal.db import mongodb
from placement_portal.services.mongo_service import ExperienceStore, UserStore


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch):
    client = mongomock.MongoClient()
    db = client["placement_portal_test"]
    monkeypatch.setattr(mongodb, "_client", client)
    monkeypatch.setattr(mongodb, "_db", db)
    mongodb.init_mongo_indexes()
    yield db
    client.close()


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(role="student", name=None, username=None):
        counter["n"] += 1
        n = counter["n"]
        doc = {
            "name": name or f"User {n}",
            "username": username or f"user{n}",
            "email": f"user{n}@college.edu",
            "password": "not-a-real-hash",
            "role": role,
            "profile": {},
            "isAlumni": role == "alumni",
        }
        doc["_id"] = UserStore().insert(doc)
        doc.pop("password")
        return doc

    return _make


@pytest.fixture
def identity():
    """Identity dict as produced by the auth dependency."""
    return identity_from_doc


@pytest.fixture
def auth_header():
    def _header(user_doc):
        token = create_access_token({"sub": str(user_doc["_id"])})
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def make_experience():
    def _make(**fields):
        doc = {
            "company": "Google",
            "role": "SDE",
            "branch": "CSE",
            "year": 2024,
            "rounds": [{"roundNumber": 1, "roundName": "Online Assessment", "questions": ["Two sum"]}],
            "package": None,
            "author": None,
            "authorName": "Anonymous",
            "views": 0,
            "helpful": 0,
            "moderationStatus": "pending",
        }
        doc.update(fields)
        doc["_id"] = ExperienceStore().insert(doc)
        return doc

    return _make


@pytest.fixture
def client():
    from placement_portal.main import app

    return TestClient(app)
