"""
End-to-end tests for the paste lifecycle.

These tests drive the whole application through HTTP: registration,
login, creation, counted and uncounted reads, update and deletion.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pasteit.services.paste_service import PasteService


class TestPasteLifecycle:
    """Register, paste, read, update, delete."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(
        self,
        async_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        # Register and log in
        register = await async_client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "AlicePass123!"},
        )
        assert register.status_code == 201

        login = await async_client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "AlicePass123!"},
        )
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['token']}"}
        account_id = login.json()["account"]["id"]

        # Create
        created = await async_client.post(
            "/api/pastes",
            headers=headers,
            json={"title": "Notes", "content": "hello", "syntax": "markdown", "tags": ["todo"]},
        )
        assert created.status_code == 201
        short_id = created.json()["short_id"]
        assert created.json()["owner_id"] == account_id

        # Counted read
        read = await async_client.get(f"/api/pastes/{short_id}")
        assert read.json()["views"] == 1

        # Uncounted read leaves the counter alone
        async with session_factory() as session:
            paste = await PasteService(session).get_by_short_id(short_id, increment_views=False)
        assert paste.views == 1

        # Listed on the owner's page and in recent pastes
        mine = await async_client.get(f"/api/users/{account_id}/pastes", headers=headers)
        assert [item["short_id"] for item in mine.json()["items"]] == [short_id]

        recent = await async_client.get("/api/pastes/recent")
        assert [item["short_id"] for item in recent.json()["items"]] == [short_id]

        # Make it unlisted: still readable, no longer listed
        updated = await async_client.put(
            f"/api/pastes/{short_id}", headers=headers, json={"visibility": "unlisted"}
        )
        assert updated.json()["success"] is True

        recent = await async_client.get("/api/pastes/recent")
        assert recent.json()["items"] == []
        assert (await async_client.get(f"/api/pastes/{short_id}")).json()["views"] == 2

        # Delete
        deleted = await async_client.delete(f"/api/pastes/{short_id}", headers=headers)
        assert deleted.json()["success"] is True

        gone = await async_client.get(f"/api/pastes/{short_id}")
        assert gone.status_code == 404
        assert gone.json()["error"]["code"] == "PASTE_NOT_FOUND_OR_EXPIRED"

    @pytest.mark.asyncio
    async def test_anonymous_protected_paste(self, async_client: AsyncClient):
        created = await async_client.post(
            "/api/pastes",
            json={"content": "the launch codes", "password": "hunter22"},
        )
        short_id = created.json()["short_id"]

        locked = await async_client.get(f"/api/pastes/{short_id}")
        assert locked.json()["content"] == ""

        unlocked = await async_client.post(
            f"/api/pastes/{short_id}", json={"password": "hunter22"}
        )
        assert unlocked.json()["content"] == "the launch codes"

        # Anonymous pastes cannot be changed without an account
        anonymous_delete = await async_client.delete(f"/api/pastes/{short_id}")
        assert anonymous_delete.status_code == 401
