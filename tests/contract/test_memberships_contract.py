"""Contract tests for membership endpoints."""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import auth_headers, create_org, create_user


@pytest.mark.asyncio
async def test_join_handle_and_list(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    org = await create_org(db, admin, "Org")

    joined = await client.post(f"/api/organizations/{org.id}/join", headers=auth_headers(user.id))
    duplicate = await client.post(
        f"/api/organizations/{org.id}/join", headers=auth_headers(user.id)
    )
    pending = await client.get(
        f"/api/organizations/{org.id}/pending-members", headers=auth_headers(admin.id)
    )

    assert joined.status_code == 201
    assert joined.json()["status"] == "pending"
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["error"] == "organization.errors.pendingRequest"
    assert [m["user_id"] for m in pending.json()] == [str(user.id)]

    handled = await client.post(
        f"/api/organizations/{org.id}/members/{user.id}/handle",
        json={"action": "accept"},
        headers=auth_headers(admin.id),
    )
    mine = await client.get("/api/me/organizations", headers=auth_headers(user.id))

    assert handled.status_code == 200
    assert handled.json()["status"] == "accepted"
    data = mine.json()
    assert [entry["organization"]["name"] for entry in data["member"]] == ["Org"]
    assert data["member"][0]["since"] is not None
    assert data["pending"] == []
    assert data["rejected"] == []


@pytest.mark.asyncio
async def test_pending_request_in_hierarchy_conflicts(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    parent = await create_org(db, admin, "Parent")
    child = await create_org(db, admin, "Child", parent=parent)

    await client.post(f"/api/organizations/{child.id}/join", headers=auth_headers(user.id))
    response = await client.post(
        f"/api/organizations/{parent.id}/join", headers=auth_headers(user.id)
    )

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "organization.errors.pendingHierarchyRequest"


@pytest.mark.asyncio
async def test_cancel_own_request(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    org = await create_org(db, admin, "Org")
    await client.post(f"/api/organizations/{org.id}/join", headers=auth_headers(user.id))

    cancelled = await client.delete(
        f"/api/organizations/{org.id}/join", headers=auth_headers(user.id)
    )
    again = await client.delete(f"/api/organizations/{org.id}/join", headers=auth_headers(user.id))

    assert cancelled.status_code == 204
    assert again.status_code == 404
    assert again.json()["detail"]["error"] == "organization.errors.requestNotFound"


@pytest.mark.asyncio
async def test_only_admins_see_pending_members(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    org = await create_org(db, admin, "Org")

    response = await client.get(
        f"/api/organizations/{org.id}/pending-members", headers=auth_headers(user.id)
    )

    assert response.status_code == 403
    assert response.json()["detail"] == {
        "error": "organization.errors.notAdmin",
        "message": "You must be an admin of this organization",
    }
