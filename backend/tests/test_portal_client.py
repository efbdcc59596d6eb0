"""
Complaint Portal - Client side session + HTTP client
1. SessionStore: hydrate / save / clear, corrupted storage cleared
2. PortalClient against the ASGI app: login, forced password change, lifecycle
3. Network failures never raise
"""

import json

import httpx
import pytest
import pytest_asyncio

from config import get_db
from server import app
from portal.api import PortalClient, NETWORK_ERROR
from portal.session import SessionStore, TOKEN_KEY, USER_KEY

USER = {"id": "u-1", "email": "c@test.local", "role": "client", "first_login": False}


class TestSessionStore:

    def test_empty_store(self, tmp_path):
        store = SessionStore(tmp_path / "session.json")
        assert store.load() is False
        assert store.is_authenticated is False
        assert store.user is None

    def test_save_then_hydrate(self, tmp_path):
        path = tmp_path / "session.json"
        SessionStore(path).save("tok", USER)

        raw = json.loads(path.read_text())
        assert set(raw) == {TOKEN_KEY, USER_KEY}

        store = SessionStore(path)
        assert store.load() is True
        assert store.token == "tok"
        assert store.user == USER

    def test_user_getter_is_a_copy(self, tmp_path):
        store = SessionStore(tmp_path / "session.json")
        store.save("tok", USER)
        store.user["role"] = "admin"
        assert store.user["role"] == "client"

    @pytest.mark.parametrize("content", [
        "not json",
        json.dumps({TOKEN_KEY: "tok", USER_KEY: "{broken"}),
        json.dumps({TOKEN_KEY: "tok", USER_KEY: json.dumps(["not", "a", "dict"])}),
        json.dumps(["list"]),
    ])
    def test_corrupted_storage_is_cleared(self, tmp_path, content):
        path = tmp_path / "session.json"
        path.write_text(content)

        store = SessionStore(path)

        assert store.load() is False
        assert store.is_authenticated is False
        assert not path.exists()

    def test_clear(self, tmp_path):
        path = tmp_path / "session.json"
        store = SessionStore(path)
        store.save("tok", USER)
        store.clear()
        assert store.token is None
        assert not path.exists()

    def test_pending_password_change_not_persisted(self, tmp_path):
        path = tmp_path / "session.json"
        store = SessionStore(path)
        store.begin_password_change("tok", {**USER, "first_login": True})

        assert store.requires_password_change is True
        assert store.is_authenticated is True
        assert not path.exists()

        store.mark_password_changed()
        assert store.requires_password_change is False
        assert SessionStore(path).load() is True
        assert store.user["first_login"] is False


@pytest_asyncio.fixture
async def portal(db, tmp_path):
    app.dependency_overrides[get_db] = lambda: db
    session = SessionStore(tmp_path / "session.json")
    client = PortalClient(
        "http://test", session, api_key="anon-key",
        transport=httpx.ASGITransport(app=app)
    )
    yield client
    await client.close()
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestPortalClient:

    async def test_login_persists_session(self, portal, make_user):
        await make_user("c@test.local", "client")

        data = await portal.login("c@test.local", "Secret1!", "client")

        assert data["success"] is True
        assert portal.session.is_authenticated
        assert portal.session.requires_password_change is False
        assert portal.session.path.exists()

    async def test_failed_login_keeps_logged_out(self, portal, make_user):
        await make_user("c@test.local", "client")

        data = await portal.login("c@test.local", "bad", "client")

        assert data["success"] is False
        assert not portal.session.is_authenticated

    async def test_forced_password_change_flow(self, portal, make_user):
        await make_user("c@test.local", "client", password="password", first_login=True)

        data = await portal.login("c@test.local", "password", "client")
        assert data["requirePasswordChange"] is True
        assert portal.session.requires_password_change
        assert not portal.session.path.exists()

        assert await portal.change_password("password", "weak") is False
        assert portal.session.requires_password_change

        assert await portal.change_password("password", "Valid1Pass!") is True
        assert portal.session.requires_password_change is False
        assert portal.session.path.exists()
        assert portal.session.user["first_login"] is False

    async def test_complaint_lifecycle(self, portal, make_user):
        client = await make_user("c@test.local", "client")
        fournisseur = await make_user("f@test.local", "fournisseur")
        await portal.login("c@test.local", "Secret1!", "client")

        created = await portal.create_complaint({"title": "Rayures", "description": "Façade rayée"})
        assert created["success"] is True
        complaint_id = created["data"]["id"]
        assert created["data"]["client_id"] == client["id"]

        assert [c["id"] for c in await portal.list_complaints()] == [complaint_id]

        assert (await portal.assign(complaint_id, fournisseur["id"]))["data"]["status"] == "assigned"
        assert (await portal.resolve(complaint_id))["data"]["status"] == "resolved"
        assert (await portal.reopen(complaint_id))["data"]["status"] == "assigned"
        assert (await portal.complaint_stats())["assigned"] == 1

        assert (await portal.delete_complaint(complaint_id))["success"] is True
        assert await portal.list_complaints() == []

    async def test_admin_user_management(self, portal, make_user):
        await make_user("admin@test.local", "admin")
        await portal.login("admin@test.local", "Secret1!", "admin")

        created = await portal.create_user("f@test.local", "fournisseur")
        assert created["success"] is True

        assert [f["email"] for f in await portal.list_fournisseurs()] == ["f@test.local"]
        assert len(await portal.list_users()) == 1

        await portal.delete_user(created["data"]["id"], "fournisseur")
        assert await portal.list_users() == []

    async def test_logout(self, portal, make_user):
        await make_user("c@test.local", "client")
        await portal.login("c@test.local", "Secret1!", "client")

        portal.logout()

        assert not portal.session.is_authenticated
        assert not portal.session.path.exists()
        assert await portal.list_complaints() == []


@pytest.mark.asyncio
class TestNetworkFailure:

    async def test_network_error_never_raises(self, tmp_path):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        session = SessionStore(tmp_path / "session.json")
        session.save("tok", USER)
        async with PortalClient(
            "http://down.test", session, transport=httpx.MockTransport(refuse)
        ) as portal:
            data = await portal.login("c@test.local", "Secret1!", "client")
            assert data == {"success": False, "message": NETWORK_ERROR}
            assert await portal.list_complaints() == []
            assert (await portal.resolve("c-1"))["success"] is False

        # la session précédente reste intacte
        assert session.user == USER
