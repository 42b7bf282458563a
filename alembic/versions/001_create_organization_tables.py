"""Create organization hierarchy tables

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create users, organizations, memberships, join-parent requests and notifications."""
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('is_superadmin', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'organizations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('parent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organizations.id'), nullable=True),
        sa.Column('created_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.CheckConstraint('LENGTH(name) > 0', name='organization_name_not_empty'),
        sa.CheckConstraint('LENGTH(description) > 0', name='organization_description_not_empty'),
        sa.CheckConstraint('parent_id IS NULL OR parent_id <> id', name='organization_not_own_parent'),
    )
    op.create_index('ix_organizations_name', 'organizations', ['name'], unique=True)
    op.create_index('ix_organizations_parent_id', 'organizations', ['parent_id'])

    op.create_table(
        'organization_admins',
        sa.Column('organization_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )
    op.create_index('ix_organization_admins_user_id', 'organization_admins', ['user_id'])

    op.create_table(
        'organization_members',
        sa.Column('organization_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('status', sa.String(8), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('accepted_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('rejection_reason', sa.String(500), nullable=True),
    )
    op.create_index('ix_organization_members_user_id', 'organization_members', ['user_id'])
    op.create_index('idx_organization_members_user_status', 'organization_members', ['user_id', 'status'])

    op.create_table(
        'join_parent_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('child_org_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_org_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('requesting_admin_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('handling_admin_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('status', sa.String(8), nullable=False, server_default='pending'),
        sa.Column('rejection_reason', sa.String(2000), nullable=True),
        sa.Column('handled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )
    op.create_index('ix_join_parent_requests_child_org_id', 'join_parent_requests', ['child_org_id'])
    op.create_index('ix_join_parent_requests_parent_org_id', 'join_parent_requests', ['parent_org_id'])
    # Storage-level backstop: one pending request per child organization
    op.create_index(
        'uq_join_parent_requests_pending_child',
        'join_parent_requests',
        ['child_org_id'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.String(255), nullable=False),
        sa.Column('data', postgresql.JSONB, nullable=True),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )
    op.create_index('idx_notifications_user_created', 'notifications', ['user_id', 'created_at'])


def downgrade() -> None:
    """Drop all organization hierarchy tables."""
    op.drop_table('notifications')
    op.drop_index('uq_join_parent_requests_pending_child', table_name='join_parent_requests')
    op.drop_table('join_parent_requests')
    op.drop_table('organization_members')
    op.drop_table('organization_admins')
    op.drop_table('organizations')
    op.drop_table('users')
