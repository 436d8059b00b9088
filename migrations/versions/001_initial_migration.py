# migrations/versions/001_initial_migration.py

"""Moderation items, abuse reports and audit log

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('moderation_items',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('content_type', sa.String(), nullable=False),
                    sa.Column('content_id', sa.String(), nullable=False),
                    sa.Column('submitter_id', sa.String(), nullable=False),
                    sa.Column('status', sa.String(), nullable=False),
                    sa.Column('priority', sa.Integer(), server_default='0', nullable=False),
                    sa.Column('reviewer_id', sa.String(), nullable=True),
                    sa.Column('reviewed_at', sa.DateTime(), nullable=True),
                    sa.Column('rejection_reason', sa.String(length=1000), nullable=True),
                    sa.Column('created_at', sa.DateTime(), nullable=False),
                    sa.Column('updated_at', sa.DateTime(), nullable=True),
                    sa.PrimaryKeyConstraint('id'),
                    # PENDING items carry no review data, reviewed items always do
                    sa.CheckConstraint(
                        "(status = 'PENDING' AND reviewed_at IS NULL AND reviewer_id IS NULL) "
                        "OR (status <> 'PENDING' AND reviewed_at IS NOT NULL AND reviewer_id IS NOT NULL)",
                        name='ck_moderation_items_review_fields',
                    ),
                    )
    op.create_index(op.f('ix_moderation_items_content_id'), 'moderation_items', ['content_id'])
    op.create_index('ix_moderation_items_status_content_type', 'moderation_items',
                    ['status', 'content_type'])
    op.create_index('ix_moderation_items_submitter_status', 'moderation_items',
                    ['submitter_id', 'status'])

    op.create_table('moderation_abuse_reports',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('content_type', sa.String(), nullable=False),
                    sa.Column('content_id', sa.String(), nullable=False),
                    sa.Column('reporter_id', sa.String(), nullable=False),
                    sa.Column('reason', sa.String(), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('status', sa.String(), nullable=False),
                    sa.Column('resolved_by', sa.String(), nullable=True),
                    sa.Column('resolution', sa.Text(), nullable=True),
                    sa.Column('created_at', sa.DateTime(), nullable=False),
                    sa.Column('updated_at', sa.DateTime(), nullable=True),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_moderation_abuse_reports_content_id'), 'moderation_abuse_reports',
                    ['content_id'])
    op.create_index(op.f('ix_moderation_abuse_reports_reporter_id'), 'moderation_abuse_reports',
                    ['reporter_id'])
    op.create_index(op.f('ix_moderation_abuse_reports_status'), 'moderation_abuse_reports',
                    ['status'])

    op.create_table('moderation_audit_log',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('actor_id', sa.String(), nullable=False),
                    sa.Column('action', sa.String(), nullable=False),
                    sa.Column('target_type', sa.String(), nullable=False),
                    sa.Column('target_id', sa.String(), nullable=False),
                    sa.Column('details', sa.Text(), nullable=True),
                    sa.Column('created_at', sa.DateTime(), nullable=False),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_moderation_audit_log_actor_id'), 'moderation_audit_log', ['actor_id'])
    op.create_index(op.f('ix_moderation_audit_log_target_id'), 'moderation_audit_log', ['target_id'])


def downgrade() -> None:
    op.drop_table('moderation_audit_log')
    op.drop_table('moderation_abuse_reports')
    op.drop_table('moderation_items')
