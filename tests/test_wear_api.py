import pytest
import httpx

from fixtures import TODAY, days_ago


@pytest.mark.asyncio
async def test_log_wear_and_list_history(client: httpx.AsyncClient):
    resp = await client.post(
        "/v1/wear",
        json={
            "item_ids": ["I1", "I2", "I1"],
            "occurred_on": days_ago(1).isoformat(),
            "outfit_id": "O1",
            "source": "saved_outfit",
            "context": "office",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["item_ids"] == ["I1", "I2"]
    assert data["outfit_id"] == "O1"
    assert data["source"] == "saved_outfit"
    assert data["worn_at"]

    hist = await client.get("/v1/wear/history")
    assert hist.status_code == 200
    assert [ev["id"] for ev in hist.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_same_outfit_same_day_is_idempotent(client: httpx.AsyncClient):
    body = {"item_ids": ["I1"], "outfit_id": "O1", "occurred_on": TODAY.isoformat()}
    first = (await client.post("/v1/wear", json=body)).json()
    second = (await client.post("/v1/wear", json=body)).json()
    assert first["id"] == second["id"]
    assert len((await client.get("/v1/wear/history")).json()) == 1


@pytest.mark.asyncio
async def test_defaults_to_manual_source(client: httpx.AsyncClient):
    resp = await client.post("/v1/wear", json={"item_ids": ["I1"], "occurred_on": TODAY.isoformat()})
    assert resp.json()["source"] == "manual_outfit"


@pytest.mark.asyncio
async def test_empty_items_rejected(client: httpx.AsyncClient):
    resp = await client.post("/v1/wear", json={"item_ids": []})
    assert resp.status_code == 422
    resp = await client.post("/v1/wear", json={"item_ids": ["  "]})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "item_ids_required"


@pytest.mark.asyncio
async def test_bad_date_and_source_rejected(client: httpx.AsyncClient):
    resp = await client.post("/v1/wear", json={"item_ids": ["I1"], "occurred_on": "19/10/2026"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_occurred_on"
    resp = await client.post("/v1/wear", json={"item_ids": ["I1"], "source": "dream"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_retract_wear(client: httpx.AsyncClient):
    ev = (await client.post("/v1/wear", json={"item_ids": ["I1"], "occurred_on": TODAY.isoformat()})).json()
    resp = await client.patch(f"/v1/wear/{ev['id']}", json={"deleted": True})
    assert resp.status_code == 204
    assert (await client.get("/v1/wear/history")).json() == []
    # retracting twice is harmless
    resp = await client.patch(f"/v1/wear/{ev['id']}", json={"deleted": True})
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_retract_requires_deleted_flag(client: httpx.AsyncClient):
    ev = (await client.post("/v1/wear", json={"item_ids": ["I1"]})).json()
    resp = await client.patch(f"/v1/wear/{ev['id']}", json={"deleted": False})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_delete_request"


@pytest.mark.asyncio
async def test_retract_unknown_event(client: httpx.AsyncClient):
    resp = await client.patch("/v1/wear/does-not-exist", json={"deleted": True})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "wear_event_not_found"


@pytest.mark.asyncio
async def test_history_limit(client: httpx.AsyncClient):
    for ago in range(3):
        await client.post("/v1/wear", json={"item_ids": [f"I{ago}"], "occurred_on": days_ago(ago).isoformat()})
    resp = await client.get("/v1/wear/history", params={"limit": 2})
    assert [ev["occurred_on"] for ev in resp.json()] == [TODAY.isoformat(), days_ago(1).isoformat()]
    resp = await client.get("/v1/wear/history", params={"limit": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_store_value_errors_are_not_reported_as_missing_items(client: httpx.AsyncClient, history_store, monkeypatch):
    async def broken_append(event):
        raise ValueError("bad array literal")

    monkeypatch.setattr(history_store, "append", broken_append)
    with pytest.raises(ValueError, match="bad array literal"):
        await client.post("/v1/wear", json={"item_ids": ["I1"], "occurred_on": TODAY.isoformat()})
