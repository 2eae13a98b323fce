import logging
import uuid


async def test_requires_login(client):
    res = await client.get("/liquor/")
    assert res.status_code == 401


async def test_liquor_crud(client, auth_headers):
    manager = await auth_headers("manager")

    res = await client.post(
        "/liquor/",
        json={"name": "Gin", "brand": "Tanqueray", "category": "Spirits", "bottles": 3, "milliliters": 250, "threshold": 2},
        headers=manager,
    )
    assert res.status_code == 201, res.text
    item = res.json()
    assert item["total_ml"] == 2500

    res = await client.put(f"/liquor/{item['id']}", json={"bottles": 1}, headers=manager)
    assert res.status_code == 200
    updated = res.json()
    assert updated["bottles"] == 1
    assert updated["milliliters"] == 250
    assert updated["total_ml"] == 1000

    res = await client.get(f"/liquor/{item['id']}", headers=manager)
    assert res.json()["name"] == "Gin"

    # managers may not delete
    res = await client.delete(f"/liquor/{item['id']}", headers=manager)
    assert res.status_code == 403

    admin = await auth_headers("admin")
    res = await client.delete(f"/liquor/{item['id']}", headers=admin)
    assert res.status_code == 204

    res = await client.get(f"/liquor/{item['id']}", headers=admin)
    assert res.status_code == 404


async def test_liquor_list_is_sorted_by_name(client, auth_headers):
    staff = await auth_headers("staff")
    for name in ("vodka", "Aperol", "Rum"):
        res = await client.post("/liquor/", json={"name": name}, headers=staff)
        assert res.status_code == 201

    res = await client.get("/liquor/", headers=staff)
    assert [i["name"] for i in res.json()] == ["Aperol", "Rum", "vodka"]


async def test_liquor_validation(client, auth_headers):
    staff = await auth_headers("staff")
    res = await client.post("/liquor/", json={"name": "Gin", "milliliters": 750}, headers=staff)
    assert res.status_code == 422
    res = await client.post("/liquor/", json={"name": "  "}, headers=staff)
    assert res.status_code == 422
    res = await client.post("/liquor/", json={"name": "Gin", "bottles": -1}, headers=staff)
    assert res.status_code == 422


async def test_staff_cannot_edit(client, auth_headers):
    staff = await auth_headers("staff")
    res = await client.post("/other-stock/", json={"name": "Limes", "unit": "kg", "quantity": 2}, headers=staff)
    assert res.status_code == 201
    res = await client.put(f"/other-stock/{res.json()['id']}", json={"quantity": 5}, headers=staff)
    assert res.status_code == 403


async def test_other_stock_crud(client, auth_headers):
    admin = await auth_headers("admin")
    res = await client.post(
        "/other-stock/",
        json={"name": "Napkins", "category": "Supplies", "quantity": 200, "unit": "pcs", "threshold": 50},
        headers=admin,
    )
    assert res.status_code == 201
    item_id = res.json()["id"]

    res = await client.put(f"/other-stock/{item_id}", json={"quantity": 150, "unit": "pieces"}, headers=admin)
    assert res.json()["quantity"] == 150
    assert res.json()["unit"] == "pieces"

    res = await client.get("/other-stock/", headers=admin)
    assert [i["id"] for i in res.json()] == [item_id]

    res = await client.delete(f"/other-stock/{item_id}", headers=admin)
    assert res.status_code == 204
    res = await client.delete(f"/other-stock/{uuid.uuid4()}", headers=admin)
    assert res.status_code == 404


async def test_low_stock(client, auth_headers):
    staff = await auth_headers("staff")
    await client.post("/liquor/", json={"name": "Rum", "bottles": 1, "milliliters": 300, "threshold": 2}, headers=staff)
    await client.post("/liquor/", json={"name": "Gin", "bottles": 5, "threshold": 2}, headers=staff)
    await client.post("/other-stock/", json={"name": "Limes", "quantity": 1.5, "unit": "kg", "threshold": 3}, headers=staff)
    await client.post("/other-stock/", json={"name": "Straws", "quantity": 100, "unit": "pcs", "threshold": 10}, headers=staff)

    res = await client.get("/inventory/low-stock", headers=staff)
    assert res.status_code == 200
    rows = {r["name"]: r for r in res.json()}
    assert set(rows) == {"Rum", "Limes"}
    assert rows["Rum"]["item_type"] == "liquor"
    assert rows["Rum"]["current_stock"] == "1 bottle and 300ML"
    assert rows["Rum"]["threshold"] == "2 bottles"
    assert rows["Limes"]["current_stock"] == "1.5 kg"
    assert rows["Limes"]["threshold"] == "3 kg"


async def test_item_updates_are_logged(client, auth_headers, caplog):
    manager = await auth_headers("manager")
    liquor = (await client.post("/liquor/", json={"name": "Rum"}, headers=manager)).json()
    other = (await client.post("/other-stock/", json={"name": "Limes", "unit": "kg"}, headers=manager)).json()

    caplog.set_level(logging.INFO)
    await client.put(f"/liquor/{liquor['id']}", json={"bottles": 2}, headers=manager)
    await client.put(f"/other-stock/{other['id']}", json={"quantity": 3}, headers=manager)

    messages = [r.getMessage() for r in caplog.records]
    assert any(f"updated liquor item {liquor['id']}" in m for m in messages)
    assert any(f"updated stock item {other['id']}" in m for m in messages)
