"""add reminder_run_markers table

Revision ID: 001_add_reminder_run_markers
Revises:
Create Date: 2025-11-03
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_add_reminder_run_markers'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'reminder_run_markers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('salon_id', sa.Uuid(), nullable=False),
        sa.Column('event_type', sa.String(), nullable=False),
        sa.Column('run_date', sa.Date(), nullable=False),
        sa.Column('sent_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('salon_id', 'event_type', 'run_date', name='uq_reminder_run_markers_salon_type_date'),
    )
    op.create_index('ix_reminder_run_markers_salon_id', 'reminder_run_markers', ['salon_id'])


def downgrade() -> None:
    op.drop_index('ix_reminder_run_markers_salon_id', table_name='reminder_run_markers')
    op.drop_table('reminder_run_markers')
