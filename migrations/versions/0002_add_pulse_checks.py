"""add pulse_checks snapshots

Revision ID: 0002_add_pulse_checks
Revises: 0001_init
Create Date: 2026-02-10

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_add_pulse_checks"
down_revision = "0001_init"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "pulse_checks",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("date_range_start", sa.Date, nullable=False),
        sa.Column("date_range_end", sa.Date, nullable=False),
        sa.Column("ticket_count", sa.Integer, nullable=False),
        sa.Column("open_count", sa.Integer, nullable=False),
        sa.Column("closed_count", sa.Integer, nullable=False),
        sa.Column("resolution_avg_min", sa.Float, nullable=False),
        sa.Column("resolution_p50_min", sa.Float, nullable=False),
        sa.Column("resolution_p90_min", sa.Float, nullable=False),
        sa.Column("tickets_analyzed", sa.Integer, nullable=False),
        sa.Column("spam_pct", sa.Float, nullable=False),
        sa.Column("unassigned_pct", sa.Float, nullable=False),
        sa.Column("channel_email", sa.Integer, nullable=False),
        sa.Column("channel_chat", sa.Integer, nullable=False),
        sa.Column("workload", postgresql.JSONB(astext_type=postgresql.TEXT()), nullable=False),
        sa.Column("top_questions", postgresql.JSONB(astext_type=postgresql.TEXT()), nullable=False),
        sa.Column("tags", postgresql.JSONB(astext_type=postgresql.TEXT()), nullable=False),
        sa.Column("ops_notes", postgresql.JSONB(astext_type=postgresql.TEXT()), nullable=False),
    )
    op.create_index("pulse_checks_created_at_idx", "pulse_checks", ["created_at"])


def downgrade() -> None:
    op.drop_index("pulse_checks_created_at_idx", table_name="pulse_checks")
    op.drop_table("pulse_checks")
