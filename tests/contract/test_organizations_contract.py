"""Contract tests for organization endpoints.

Errors come back as ``{"detail": {"error": <code>, "message": <text>}}``.
"""
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import add_member, auth_headers, create_org, create_user


@pytest.mark.asyncio
async def test_create_organization(client: AsyncClient, db: AsyncSession):
    """POST /api/organizations returns 201 with the stored organization."""
    user = await create_user(db, "Founder")

    response = await client.post(
        "/api/organizations",
        json={"name": "Acme", "description": "Rocket skates"},
        headers=auth_headers(user.id),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Acme"
    assert data["parent_id"] is None
    assert data["created_by_id"] == str(user.id)
    assert data["archived_at"] is None


@pytest.mark.asyncio
async def test_create_organization_error_shapes(client: AsyncClient, db: AsyncSession):
    user = await create_user(db, "Founder")
    outsider = await create_user(db, "Outsider")
    parent = await create_org(db, user, "Parent")

    taken = await client.post(
        "/api/organizations",
        json={"name": "Parent", "description": "dup"},
        headers=auth_headers(user.id),
    )
    empty = await client.post(
        "/api/organizations",
        json={"name": " ", "description": "x"},
        headers=auth_headers(user.id),
    )
    forbidden = await client.post(
        "/api/organizations",
        json={"name": "Child", "description": "x", "parent_id": str(parent.id)},
        headers=auth_headers(outsider.id),
    )
    missing_parent = await client.post(
        "/api/organizations",
        json={"name": "Child", "description": "x", "parent_id": str(uuid4())},
        headers=auth_headers(user.id),
    )

    assert taken.status_code == 409
    assert taken.json()["detail"]["error"] == "organization.errors.nameExists"
    assert taken.json()["detail"]["message"]
    assert empty.status_code == 422
    assert empty.json()["detail"]["error"] == "domain.organization.organizationNameEmpty"
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["error"] == "organization.errors.notAdmin"
    assert missing_parent.status_code == 404
    assert missing_parent.json()["detail"]["error"] == "organization.errors.parentNotFound"


@pytest.mark.asyncio
async def test_list_and_exclude_mine(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    parent = await create_org(db, admin, "Parent")
    child = await create_org(db, admin, "Child", parent=parent)
    await add_member(db, child, user)

    everything = await client.get("/api/organizations", headers=auth_headers(user.id))
    filtered = await client.get(
        "/api/organizations", params={"exclude_mine": "true"}, headers=auth_headers(user.id)
    )

    assert everything.status_code == 200
    by_name = {item["organization"]["name"]: item for item in everything.json()}
    assert by_name["Child"]["member_count"] == 1
    assert by_name["Child"]["parent"] == {"id": str(parent.id), "name": "Parent"}
    assert by_name["Parent"]["parent"] is None
    assert [item["organization"]["name"] for item in filtered.json()] == ["Parent"]


@pytest.mark.asyncio
async def test_admin_organizations(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    await create_org(db, admin, "Mine")

    response = await client.get("/api/organizations/admin", headers=auth_headers(admin.id))

    assert response.status_code == 200
    assert [org["name"] for org in response.json()] == ["Mine"]


@pytest.mark.asyncio
async def test_organization_details(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    org = await create_org(db, admin, "Org")
    archived = await create_org(db, admin, "Gone", archived=True)

    found = await client.get(f"/api/organizations/{org.id}", headers=auth_headers(admin.id))
    closed = await client.get(f"/api/organizations/{archived.id}", headers=auth_headers(admin.id))
    missing = await client.get(f"/api/organizations/{uuid4()}", headers=auth_headers(admin.id))

    assert found.status_code == 200
    data = found.json()
    assert data["organization"]["id"] == str(org.id)
    assert data["is_user_admin"] is True
    assert data["is_user_member"] is False
    assert data["member_count"] == 0
    assert closed.status_code == 409
    assert closed.json()["detail"]["error"] == "organization.errors.archived"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_hierarchy(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    root = await create_org(db, admin, "Root")
    child = await create_org(db, admin, "Child", parent=root)
    leaf = await create_org(db, admin, "Leaf", parent=child)

    response = await client.get(
        f"/api/organizations/{leaf.id}/hierarchy", headers=auth_headers(admin.id)
    )

    assert response.status_code == 200
    data = response.json()
    assert data["organization_id"] == str(leaf.id)
    assert [a["name"] for a in data["ancestors"]] == ["Child", "Root"]
    assert data["tree"]["name"] == "Root"
    assert data["tree"]["children"][0]["name"] == "Child"
    assert data["tree"]["children"][0]["children"][0] == {
        "id": str(leaf.id),
        "name": "Leaf",
        "member_count": 0,
        "children": [],
    }


@pytest.mark.asyncio
async def test_archive(client: AsyncClient, db: AsyncSession):
    admin = await create_user(db, "Admin")
    outsider = await create_user(db, "Outsider")
    org = await create_org(db, admin, "Org")

    forbidden = await client.post(
        f"/api/organizations/{org.id}/archive", headers=auth_headers(outsider.id)
    )
    archived = await client.post(
        f"/api/organizations/{org.id}/archive", headers=auth_headers(admin.id)
    )
    again = await client.post(
        f"/api/organizations/{org.id}/archive", headers=auth_headers(admin.id)
    )

    assert forbidden.status_code == 403
    assert archived.status_code == 200
    assert archived.json()["archived_at"] is not None
    assert again.status_code == 409
    assert again.json()["detail"]["error"] == "domain.organization.organizationAlreadyArchived"
