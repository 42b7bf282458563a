"""Integration tests for user membership requests."""

from uuid import uuid4

import pytest

from orgtree.domain.codes import MembershipDomainCode
from orgtree.models import MembershipStatus
from orgtree.models.enums import HandleAction
from orgtree.services.errors import OrganizationError
from tests.conftest import add_member, create_org, create_user


@pytest.mark.asyncio
async def test_join_creates_pending_request(db, membership_service, org_repo):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    org = await create_org(db, admin, "Org")

    result = await membership_service.join_organization(user.id, org.id)

    assert result.success
    assert result.value.status == MembershipStatus.PENDING
    stored = await org_repo.find_membership(user.id, org.id)
    assert stored.is_pending


@pytest.mark.asyncio
async def test_pending_request_blocks_the_whole_chain(db, membership_service):
    """Scenario: a pending request on B blocks A (ancestor) and C (descendant)."""
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    org_a = await create_org(db, admin, "A")
    org_b = await create_org(db, admin, "B", parent=org_a)
    org_c = await create_org(db, admin, "C", parent=org_b)
    unrelated = await create_org(db, admin, "Unrelated")

    assert (await membership_service.join_organization(user.id, org_b.id)).success

    for org in (org_a, org_c):
        result = await membership_service.join_organization(user.id, org.id)
        assert result.error == OrganizationError.PENDING_HIERARCHY_REQUEST

    assert (await membership_service.join_organization(user.id, unrelated.id)).success


@pytest.mark.asyncio
async def test_accepted_memberships_across_levels_are_allowed(db, membership_service):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    parent = await create_org(db, admin, "Parent")
    child = await create_org(db, admin, "Child", parent=parent)
    await add_member(db, parent, user)

    result = await membership_service.join_organization(user.id, child.id)

    assert result.success


@pytest.mark.asyncio
async def test_existing_row_decides_the_error(db, membership_service):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    accepted = await create_org(db, admin, "Accepted")
    pending = await create_org(db, admin, "Pending")
    rejected = await create_org(db, admin, "Rejected")
    await add_member(db, accepted, user)
    await add_member(db, pending, user, MembershipStatus.PENDING)
    await add_member(db, rejected, user, MembershipStatus.REJECTED)

    expected = {
        accepted.id: OrganizationError.ALREADY_MEMBER,
        pending.id: OrganizationError.PENDING_REQUEST,
        rejected.id: OrganizationError.REJECTED_REQUEST,
    }
    for org_id, error in expected.items():
        result = await membership_service.join_organization(user.id, org_id)
        assert result.error == error


@pytest.mark.asyncio
async def test_join_missing_or_archived(db, membership_service):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    archived = await create_org(db, admin, "Archived", archived=True)

    missing = await membership_service.join_organization(user.id, uuid4())
    closed = await membership_service.join_organization(user.id, archived.id)

    assert missing.error == OrganizationError.NOT_FOUND
    assert closed.error == OrganizationError.ARCHIVED


class TestCancelJoinRequest:
    @pytest.mark.asyncio
    async def test_cancel_removes_pending_row(self, db, membership_service, org_repo):
        admin = await create_user(db, "Admin")
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        await membership_service.join_organization(user.id, org.id)

        result = await membership_service.cancel_join_request(user.id, org.id)

        assert result.success
        assert await org_repo.find_membership(user.id, org.id) is None

    @pytest.mark.asyncio
    async def test_cancel_requires_pending_row(self, db, membership_service):
        admin = await create_user(db, "Admin")
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        other = await create_org(db, admin, "Other")
        await add_member(db, org, user)

        accepted = await membership_service.cancel_join_request(user.id, org.id)
        missing = await membership_service.cancel_join_request(user.id, other.id)

        assert accepted.error == OrganizationError.NOT_PENDING
        assert missing.error == OrganizationError.REQUEST_NOT_FOUND


class TestHandleJoinRequest:
    @pytest.mark.asyncio
    async def test_accept_makes_user_a_member(self, db, membership_service, org_repo):
        admin = await create_user(db, "Admin")
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        await membership_service.join_organization(user.id, org.id)

        result = await membership_service.handle_join_request(
            admin.id, org.id, user.id, HandleAction.ACCEPT
        )

        assert result.success
        assert result.value.status == MembershipStatus.ACCEPTED
        assert result.value.accepted_by_id == admin.id
        assert await org_repo.is_user_member(user.id, org.id)

    @pytest.mark.asyncio
    async def test_reject_with_optional_reason(self, db, membership_service):
        admin = await create_user(db, "Admin")
        first = await create_user(db, "First")
        second = await create_user(db, "Second")
        org = await create_org(db, admin, "Org")
        await membership_service.join_organization(first.id, org.id)
        await membership_service.join_organization(second.id, org.id)

        without_reason = await membership_service.handle_join_request(
            admin.id, org.id, first.id, HandleAction.REJECT
        )
        with_reason = await membership_service.handle_join_request(
            admin.id, org.id, second.id, HandleAction.REJECT, "Wrong team"
        )

        assert without_reason.value.status == MembershipStatus.REJECTED
        assert without_reason.value.rejection_reason is None
        assert with_reason.value.rejection_reason == "Wrong team"

    @pytest.mark.asyncio
    async def test_reason_length_is_bounded(self, db, membership_service):
        admin = await create_user(db, "Admin")
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        await membership_service.join_organization(user.id, org.id)

        result = await membership_service.handle_join_request(
            admin.id, org.id, user.id, HandleAction.REJECT, "r" * 501
        )

        assert result.error == MembershipDomainCode.REJECTION_REASON_TOO_LONG

    @pytest.mark.asyncio
    async def test_handle_checks(self, db, membership_service):
        admin = await create_user(db, "Admin")
        outsider = await create_user(db, "Outsider")
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        await add_member(db, org, user)

        not_admin = await membership_service.handle_join_request(
            outsider.id, org.id, user.id, HandleAction.ACCEPT
        )
        not_pending = await membership_service.handle_join_request(
            admin.id, org.id, user.id, HandleAction.ACCEPT
        )
        missing = await membership_service.handle_join_request(
            admin.id, org.id, outsider.id, HandleAction.ACCEPT
        )

        assert not_admin.error == OrganizationError.NOT_ADMIN
        assert not_pending.error == OrganizationError.NOT_PENDING
        assert missing.error == OrganizationError.REQUEST_NOT_FOUND

    @pytest.mark.asyncio
    async def test_superadmin_can_handle(self, db, membership_service):
        admin = await create_user(db, "Admin")
        superadmin = await create_user(db, "Root", is_superadmin=True)
        user = await create_user(db, "User")
        org = await create_org(db, admin, "Org")
        await membership_service.join_organization(user.id, org.id)

        result = await membership_service.handle_join_request(
            superadmin.id, org.id, user.id, HandleAction.ACCEPT
        )

        assert result.success


@pytest.mark.asyncio
async def test_pending_requests_listing(db, membership_service):
    admin = await create_user(db, "Admin")
    outsider = await create_user(db, "Outsider")
    first = await create_user(db, "First")
    second = await create_user(db, "Second")
    org = await create_org(db, admin, "Org")
    await membership_service.join_organization(first.id, org.id)
    await membership_service.join_organization(second.id, org.id)
    await membership_service.handle_join_request(admin.id, org.id, second.id, HandleAction.ACCEPT)

    listing = await membership_service.get_organization_pending_requests(admin.id, org.id)
    forbidden = await membership_service.get_organization_pending_requests(outsider.id, org.id)
    missing = await membership_service.get_organization_pending_requests(admin.id, uuid4())

    assert [m.user_id for m in listing.value] == [first.id]
    assert forbidden.error == OrganizationError.NOT_ADMIN
    assert missing.error == OrganizationError.NOT_FOUND


@pytest.mark.asyncio
async def test_user_organizations_grouped_by_status(db, membership_service):
    admin = await create_user(db, "Admin")
    user = await create_user(db, "User")
    parent = await create_org(db, admin, "Parent")
    member_of = await create_org(db, admin, "Member of", parent=parent)
    waiting = await create_org(db, admin, "Waiting")
    refused = await create_org(db, admin, "Refused")
    await add_member(db, member_of, user)
    await add_member(db, waiting, user, MembershipStatus.PENDING)
    await add_member(db, refused, user, MembershipStatus.REJECTED)

    result = await membership_service.get_user_organizations(user.id)

    assert result.success
    grouped = result.value
    assert [entry.organization.id for entry in grouped.member] == [member_of.id]
    assert grouped.member[0].parent.name == "Parent"
    assert grouped.member[0].since is not None
    assert [entry.organization.id for entry in grouped.pending] == [waiting.id]
    assert grouped.pending[0].parent is None
    assert [entry.organization.id for entry in grouped.rejected] == [refused.id]
