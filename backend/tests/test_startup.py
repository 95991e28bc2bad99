from fastapi.testclient import TestClient

from focusquote.db import Base, engine
from focusquote.main import app
from focusquote.session import sessions


def _wipe():
    with engine.begin() as conn:
        for tbl in reversed(Base.metadata.sorted_tables):
            conn.execute(tbl.delete())
    sessions.clear()


def test_startup_creates_missing_tables():
    # banco vazio, como num primeiro deploy
    Base.metadata.drop_all(engine)
    try:
        with TestClient(app) as client:
            r = client.post("/auth/register", json={"email": "primeiro@example.com", "password": "secret123"})
            assert r.status_code == 200, r.text
            token = r.json()["access_token"]
            r = client.post("/session/sync", headers={"Authorization": f"Bearer {token}"})
            assert r.status_code == 200, r.text
            assert r.json()["profile"]["name"] == "primeiro"
    finally:
        Base.metadata.create_all(engine)
        _wipe()


def test_startup_keeps_existing_rows():
    try:
        with TestClient(app) as client:
            r = client.post("/auth/register", json={"email": "segundo@example.com", "password": "secret123"})
            assert r.status_code == 200, r.text
        with TestClient(app) as client:
            r = client.post("/auth/login", json={"email": "segundo@example.com", "password": "secret123"})
            assert r.status_code == 200, r.text
    finally:
        _wipe()
