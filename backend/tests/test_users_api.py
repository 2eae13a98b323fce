import logging

from conftest import PASSWORD, create_user, login


async def test_setup_creates_first_admin_once(client):
    res = await client.get("/setup/")
    assert res.json() == {"setup_needed": True}

    res = await client.post("/setup/", json={"name": "Owner", "email": "owner@barstock.com", "password": PASSWORD})
    assert res.status_code == 201, res.text
    assert res.json()["role"] == "admin"

    res = await client.get("/setup/")
    assert res.json() == {"setup_needed": False}

    res = await client.post("/setup/", json={"name": "Intruder", "email": "x@barstock.com", "password": PASSWORD})
    assert res.status_code == 409

    headers = await login(client, "owner@barstock.com")
    res = await client.get("/users/me", headers=headers)
    me = res.json()
    assert me["name"] == "Owner"
    assert "manage_users" in me["permissions"]


async def test_setup_rejects_short_password(client):
    res = await client.post("/setup/", json={"name": "Owner", "email": "owner@barstock.com", "password": "123"})
    assert res.status_code == 400


async def test_admin_manages_users(client, auth_headers):
    admin = await auth_headers("admin")

    res = await client.post(
        "/users/",
        json={"email": "new@barstock.com", "password": PASSWORD, "name": "New Hire"},
        headers=admin,
    )
    assert res.status_code == 201, res.text
    new_user = res.json()
    assert new_user["role"] == "staff"

    res = await client.post(
        "/users/",
        json={"email": "new@barstock.com", "password": PASSWORD, "name": "Again"},
        headers=admin,
    )
    assert res.status_code == 409

    res = await client.patch(f"/users/{new_user['id']}/role", json={"role": "manager"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["role"] == "manager"

    res = await client.get("/users/", headers=admin)
    assert {u["email"] for u in res.json()} == {"admin@barstock.com", "new@barstock.com"}

    headers = await login(client, "new@barstock.com")
    res = await client.get("/users/me", headers=headers)
    assert "view_sales" in res.json()["permissions"]


async def test_invalid_role_is_rejected(client, auth_headers):
    admin = await auth_headers("admin")
    res = await client.post(
        "/users/",
        json={"email": "x@barstock.com", "password": PASSWORD, "name": "X", "role": "owner"},
        headers=admin,
    )
    assert res.status_code == 422


async def test_non_admin_cannot_manage_users(client, auth_headers):
    manager = await auth_headers("manager")
    res = await client.get("/users/", headers=manager)
    assert res.status_code == 403
    res = await client.post(
        "/users/",
        json={"email": "x@barstock.com", "password": PASSWORD, "name": "X", "role": "admin"},
        headers=manager,
    )
    assert res.status_code == 403


async def test_me_requires_login(client):
    res = await client.get("/users/me")
    assert res.status_code == 401


async def test_password_reset_flow(client, session_maker, caplog):
    await create_user(session_maker, "bartender@barstock.com", "staff")
    caplog.set_level(logging.INFO, logger="core.auth.reset_tokens")

    res = await client.post("/auth/forgot-password", json={"email": "bartender@barstock.com"})
    assert res.status_code == 202

    [record] = [r for r in caplog.records if r.name == "core.auth.reset_tokens"]
    assert record.reset_token in record.getMessage()

    res = await client.post("/auth/reset-password", json={"token": record.reset_token, "password": "newsecret456"})
    assert res.status_code == 200, res.text

    await login(client, "bartender@barstock.com", "newsecret456")
    res = await client.post("/auth/jwt/login", data={"username": "bartender@barstock.com", "password": PASSWORD})
    assert res.status_code == 400


async def test_last_admin_cannot_be_demoted(client, auth_headers):
    admin = await auth_headers("admin")
    me = (await client.get("/users/me", headers=admin)).json()

    res = await client.patch(f"/users/{me['id']}/role", json={"role": "staff"}, headers=admin)
    assert res.status_code == 409

    res = await client.get("/users/", headers=admin)
    assert res.status_code == 200


async def test_role_change_keeps_superuser_flag_in_sync(client, auth_headers):
    admin = await auth_headers("admin")

    res = await client.post(
        "/users/",
        json={"email": "second@barstock.com", "password": PASSWORD, "name": "Second", "role": "admin"},
        headers=admin,
    )
    assert res.status_code == 201
    second = res.json()
    assert second["is_superuser"] is True

    res = await client.patch(f"/users/{second['id']}/role", json={"role": "manager"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["role"] == "manager"
    assert res.json()["is_superuser"] is False

    res = await client.patch(f"/users/{second['id']}/role", json={"role": "admin"}, headers=admin)
    assert res.json()["is_superuser"] is True

    # with two admins, one may step down
    me = (await client.get("/users/me", headers=admin)).json()
    res = await client.patch(f"/users/{me['id']}/role", json={"role": "staff"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["is_superuser"] is False
