import pytest

from conftest import create_client, quote_payload, register
from focusquote import documents, gateway


@pytest.mark.anyio
async def test_create_quote_computes_total(ac, user):
    client = await create_client(ac, user["headers"])
    payload = quote_payload(client["id"])
    payload["total_cents"] = 1  # ignorado: sempre recalculado
    r = await ac.post("/quotes/", json=payload, headers=user["headers"])
    assert r.status_code == 200, r.text
    q = r.json()
    assert q["total_cents"] == 24000
    assert q["status"] == "draft"
    assert len(q["number"]) == 12
    assert [i["name"] for i in q["items"]] == ["Ensaio externo", "Álbum"]

    r = await ac.get(f"/quotes/by-id/{q['id']}", headers=user["headers"])
    assert r.status_code == 200
    assert r.json()["total_cents"] == 24000
    assert [i["quantity"] for i in r.json()["items"]] == [2, 1]


@pytest.mark.anyio
async def test_validation_happens_before_store(ac, user):
    r = await ac.post("/quotes/", json=quote_payload(None), headers=user["headers"])
    assert r.status_code == 400
    assert r.json()["detail"] == "Selecione um cliente!"

    client = await create_client(ac, user["headers"])
    r = await ac.post("/quotes/", json=quote_payload(client["id"], items=[]), headers=user["headers"])
    assert r.status_code == 400
    assert r.json()["detail"] == "Adicione pelo menos um serviço!"

    r = await ac.get("/quotes/", headers=user["headers"])
    assert r.json() == []


@pytest.mark.anyio
async def test_update_replaces_items_wholesale(ac, user):
    client = await create_client(ac, user["headers"])
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=user["headers"])).json()

    new = quote_payload(
        client["id"],
        items=[{"name": "Cobertura de evento", "unit_price_cents": 80000, "quantity": 1, "type": "daily"}],
        discount_cents=0,
        extra_fees_cents=0,
    )
    r = await ac.put(f"/quotes/by-id/{q['id']}", json=new, headers=user["headers"])
    assert r.status_code == 200, r.text
    assert r.json()["number"] == q["number"]
    assert r.json()["total_cents"] == 80000

    r = await ac.get(f"/quotes/by-id/{q['id']}", headers=user["headers"])
    assert [i["name"] for i in r.json()["items"]] == ["Cobertura de evento"]


@pytest.mark.anyio
async def test_update_without_status_keeps_stored_status(ac, user):
    h = user["headers"]
    client = await create_client(ac, h)
    q = (await ac.post("/quotes/", json=quote_payload(client["id"], status="approved"), headers=h)).json()

    edit = quote_payload(client["id"], notes="Inclui making of")
    assert "status" not in edit
    r = await ac.put(f"/quotes/by-id/{q['id']}", json=edit, headers=h)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "approved"

    r = await ac.get(f"/quotes/by-id/{q['id']}", headers=h)
    assert r.json()["status"] == "approved"
    assert r.json()["notes"] == "Inclui making of"
    r = await ac.get("/finance/cashflow", params={"start": "2026-10-01", "end": "2026-10-31"}, headers=h)
    assert r.json()["stats"]["income_cents"] == 24000

    # status explícito no save continua valendo
    r = await ac.put(f"/quotes/by-id/{q['id']}", json=quote_payload(client["id"], status="sent"), headers=h)
    assert r.json()["status"] == "sent"


@pytest.mark.anyio
async def test_failed_item_insert_rolls_back_whole_save(ac, user, monkeypatch):
    h = user["headers"]
    client = await create_client(ac, h)
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=h)).json()

    # dois itens com o mesmo id: o segundo insert viola a chave primária
    monkeypatch.setattr(gateway, "new_id", lambda: "item-repetido")
    new = quote_payload(
        client["id"],
        status="sent",
        items=[
            {"name": "Cobertura de evento", "unit_price_cents": 80000, "quantity": 1, "type": "daily"},
            {"name": "Drone", "unit_price_cents": 30000, "quantity": 1, "type": "package"},
        ],
    )
    r = await ac.put(f"/quotes/by-id/{q['id']}", json=new, headers=h)
    assert r.status_code == 503
    monkeypatch.undo()

    r = await ac.get(f"/quotes/by-id/{q['id']}", headers=h)
    stored = r.json()
    assert stored["status"] == "draft"
    assert stored["total_cents"] == 24000
    assert [i["name"] for i in stored["items"]] == ["Ensaio externo", "Álbum"]


@pytest.mark.anyio
async def test_manual_status_change_any_direction(ac, user):
    client = await create_client(ac, user["headers"])
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=user["headers"])).json()
    for status in ("declined", "draft", "approved", "sent"):
        r = await ac.patch(f"/quotes/by-id/{q['id']}/status", json={"status": status}, headers=user["headers"])
        assert r.status_code == 200, r.text
        assert r.json()["status"] == status
        assert r.json()["total_cents"] == 24000

    r = await ac.get("/quotes/", params={"status": "sent"}, headers=user["headers"])
    assert [x["id"] for x in r.json()] == [q["id"]]


@pytest.mark.anyio
async def test_quotes_are_scoped_by_owner(ac, user):
    client = await create_client(ac, user["headers"])
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=user["headers"])).json()

    other = await register(ac, email="outro@example.com")
    r = await ac.get(f"/quotes/by-id/{q['id']}", headers=other["headers"])
    assert r.status_code == 404
    r = await ac.post("/quotes/", json=quote_payload(client["id"]), headers=other["headers"])
    assert r.status_code == 400


@pytest.mark.anyio
async def test_search_and_delete(ac, user):
    maria = await create_client(ac, user["headers"])
    pedro = await create_client(ac, user["headers"], name="Pedro Alves")
    q1 = (await ac.post("/quotes/", json=quote_payload(maria["id"], number="010120260900"), headers=user["headers"])).json()
    q2 = (await ac.post("/quotes/", json=quote_payload(pedro["id"], number="020120260900"), headers=user["headers"])).json()

    r = await ac.get("/quotes/", params={"q": "pedro"}, headers=user["headers"])
    assert [x["id"] for x in r.json()] == [q2["id"]]
    r = await ac.get("/quotes/", params={"q": "010120"}, headers=user["headers"])
    assert [x["id"] for x in r.json()] == [q1["id"]]

    r = await ac.delete(f"/quotes/by-id/{q1['id']}", headers=user["headers"])
    assert r.status_code == 204
    r = await ac.get(f"/quotes/by-id/{q1['id']}", headers=user["headers"])
    assert r.status_code == 404


@pytest.mark.anyio
async def test_defaults_and_item_from_service(ac, user):
    r = await ac.get("/quotes/defaults", headers=user["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "draft"
    assert body["payment_method"] == "pix"
    assert body["payment_conditions"] == "50% reserva + 50% entrega"

    s = await ac.post("/services/", json={"name": "Book", "default_price_cents": 45000, "type": "package"},
                      headers=user["headers"])
    assert s.status_code == 200, s.text
    r = await ac.post(f"/quotes/items/from-service/{s.json()['id']}", headers=user["headers"])
    assert r.json() == {"name": "Book", "description": "", "unit_price_cents": 45000, "quantity": 1, "type": "package"}


@pytest.mark.anyio
async def test_download_pdf(ac, user, monkeypatch):
    monkeypatch.setattr(documents, "_write_pdf", lambda html: b"%PDF-1.7 test")
    client = await create_client(ac, user["headers"])
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=user["headers"])).json()
    r = await ac.get(f"/quotes/by-id/{q['id']}/download.pdf", headers=user["headers"])
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/pdf")
    assert r.content[:4] == b"%PDF"
    assert "Maria_Souza.pdf" in r.headers["content-disposition"]


@pytest.mark.anyio
async def test_share_links(ac, user):
    client = await create_client(ac, user["headers"])
    q = (await ac.post("/quotes/", json=quote_payload(client["id"]), headers=user["headers"])).json()
    r = await ac.get(f"/quotes/by-id/{q['id']}/share", headers=user["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["url"] == f"http://test/public?view=public&q={q['id']}&u={user['id']}"
    assert body["whatsapp_url"].startswith("https://wa.me/11987654321?text=")

    no_phone = await create_client(ac, user["headers"], name="Sem Fone", phone="")
    q2 = (await ac.post("/quotes/", json=quote_payload(no_phone["id"]), headers=user["headers"])).json()
    r = await ac.get(f"/quotes/by-id/{q2['id']}/share", headers=user["headers"])
    assert r.status_code == 400
    assert r.json()["detail"] == "Cliente sem telefone cadastrado."
    r = await ac.get(f"/quotes/by-id/{q2['id']}/public_url", headers=user["headers"])
    assert r.status_code == 200
