"""SQLAlchemy implementation of the join-parent request repository port."""
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgtree.domain.join_parent_request import JoinParentRequest
from orgtree.models.enums import JoinParentRequestStatus
from orgtree.models.join_parent_request import JoinParentRequestModel


def _to_entity(model: JoinParentRequestModel) -> JoinParentRequest:
    return JoinParentRequest.reconstitute(
        id=model.id,
        child_org_id=model.child_org_id,
        parent_org_id=model.parent_org_id,
        requesting_admin_id=model.requesting_admin_id,
        handling_admin_id=model.handling_admin_id,
        message=model.message,
        status=model.status,
        rejection_reason=model.rejection_reason,
        created_at=model.created_at,
        handled_at=model.handled_at,
    )


class SqlAlchemyJoinParentRequestRepository:
    """Join-parent request persistence backed by an ``AsyncSession``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, request: JoinParentRequest) -> JoinParentRequest:
        model = JoinParentRequestModel(
            child_org_id=request.child_org_id,
            parent_org_id=request.parent_org_id,
            requesting_admin_id=request.requesting_admin_id,
            handling_admin_id=request.handling_admin_id,
            message=request.message,
            status=request.status,
            rejection_reason=request.rejection_reason,
            created_at=request.created_at,
            handled_at=request.handled_at,
        )
        self.db.add(model)
        await self.db.flush()
        return _to_entity(model)

    async def find_by_id(self, request_id: UUID) -> Optional[JoinParentRequest]:
        model = await self._get_model(request_id)
        return _to_entity(model) if model else None

    async def find_pending_by_child_org_id(self, child_org_id: UUID) -> Optional[JoinParentRequest]:
        result = await self.db.execute(
            select(JoinParentRequestModel).where(
                JoinParentRequestModel.child_org_id == child_org_id,
                JoinParentRequestModel.status == JoinParentRequestStatus.PENDING,
            )
        )
        model = result.scalars().first()
        return _to_entity(model) if model else None

    async def find_pending_by_parent_org_id(self, parent_org_id: UUID) -> list[JoinParentRequest]:
        return await self._find_many(
            JoinParentRequestModel.parent_org_id == parent_org_id,
            JoinParentRequestModel.status == JoinParentRequestStatus.PENDING,
        )

    async def find_all_by_child_org_id(self, child_org_id: UUID) -> list[JoinParentRequest]:
        return await self._find_many(JoinParentRequestModel.child_org_id == child_org_id)

    async def find_all_by_parent_org_id(self, parent_org_id: UUID) -> list[JoinParentRequest]:
        return await self._find_many(JoinParentRequestModel.parent_org_id == parent_org_id)

    async def update(self, request: JoinParentRequest) -> JoinParentRequest:
        model = await self._get_model(request.id)
        if model is None:
            raise LookupError(f"Join-parent request {request.id} disappeared during update")
        model.handling_admin_id = request.handling_admin_id
        model.status = request.status
        model.rejection_reason = request.rejection_reason
        model.handled_at = request.handled_at
        await self.db.flush()
        return _to_entity(model)

    async def delete(self, request_id: UUID) -> None:
        await self.db.execute(
            delete(JoinParentRequestModel).where(JoinParentRequestModel.id == request_id)
        )
        await self.db.flush()

    async def _get_model(self, request_id: UUID) -> Optional[JoinParentRequestModel]:
        result = await self.db.execute(
            select(JoinParentRequestModel).where(JoinParentRequestModel.id == request_id)
        )
        return result.scalar_one_or_none()

    async def _find_many(self, *criteria) -> list[JoinParentRequest]:
        result = await self.db.execute(
            select(JoinParentRequestModel)
            .where(*criteria)
            .order_by(JoinParentRequestModel.created_at.desc())
        )
        return [_to_entity(m) for m in result.scalars().all()]
