import os
import tempfile

# banco descartável antes de importar o app (config lê o ambiente no import)
_TMP = tempfile.mkdtemp(prefix="focusquote-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["PUBLIC_BASE_URL"] = "http://test"

import pytest
import httpx
from httpx import ASGITransport

from focusquote import models  # noqa: F401  registra as tabelas
from focusquote.db import Base, database, init_db
from focusquote.main import app
from focusquote.session import sessions

init_db()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def db():
    await database.connect()
    try:
        yield database
    finally:
        for tbl in reversed(Base.metadata.sorted_tables):
            await database.execute(tbl.delete())
        sessions.clear()
        await database.disconnect()


@pytest.fixture
async def ac(db):
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def register(ac: httpx.AsyncClient, email: str = "ana.foto@example.com", password: str = "secret123") -> dict:
    r = await ac.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
    me = await ac.get("/auth/me", headers=headers)
    assert me.status_code == 200, me.text
    return {"headers": headers, "id": me.json()["id"], "email": email}


@pytest.fixture
async def user(ac):
    return await register(ac)


async def create_client(ac, headers, **overrides) -> dict:
    payload = {
        "name": "Maria Souza",
        "tax_id": "123.456.789-00",
        "phone": "(11) 98765-4321",
        "email": "maria@example.com",
        "address": "Rua das Flores, 10",
        "type": "PF",
    }
    payload.update(overrides)
    r = await ac.post("/clients/", json=payload, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def quote_payload(client_id, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "date": "2026-10-10",
        "valid_until": "2026-10-25",
        "items": [
            {"name": "Ensaio externo", "unit_price_cents": 10000, "quantity": 2, "type": "hourly"},
            {"name": "Álbum", "unit_price_cents": 5000, "quantity": 1, "type": "package"},
        ],
        "discount_cents": 2000,
        "extra_fees_cents": 1000,
        "payment_method": "pix",
        "payment_conditions": "50% reserva + 50% entrega",
    }
    payload.update(overrides)
    return payload
