"""initial schema

Revision ID: 0001_init
Revises:
Create Date: 2026-02-09

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "agent_behavior_log",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("event_id", sa.Text, nullable=False),
        sa.Column("event_type", sa.Text, nullable=False),
        sa.Column("ticket_id", sa.BigInteger, nullable=True),
        sa.Column("ticket_subject", sa.Text, nullable=True),
        sa.Column("ticket_channel", sa.Text, nullable=True),
        sa.Column("ticket_category", sa.Text, nullable=True),
        sa.Column("ticket_tags", postgresql.ARRAY(sa.Text), nullable=True),
        sa.Column("ticket_created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("agent_id", sa.BigInteger, nullable=True),
        sa.Column("agent_name", sa.Text, nullable=True),
        sa.Column("agent_email", sa.Text, nullable=True),
        sa.Column("response_text", sa.Text, nullable=True),
        sa.Column("response_char_count", sa.Integer, nullable=True),
        sa.Column("is_macro", sa.Boolean, nullable=True),
        sa.Column("macro_id", sa.BigInteger, nullable=True),
        sa.Column("macro_name", sa.Text, nullable=True),
        sa.Column("message_position", sa.Integer, nullable=True),
        sa.Column("time_to_first_response_min", sa.Float, nullable=True),
        sa.Column("touches_to_resolution", sa.Integer, nullable=True),
        sa.Column("csat_score", sa.SmallInteger, nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("raw_payload", postgresql.JSONB(astext_type=postgresql.TEXT()), nullable=True),
        sa.CheckConstraint("csat_score BETWEEN 1 AND 5", name="agent_behavior_log_csat_range"),
    )
    op.create_index(
        "agent_behavior_log_event_id_key", "agent_behavior_log", ["event_id"], unique=True
    )
    op.create_index(
        "agent_behavior_log_ticket_event_idx",
        "agent_behavior_log",
        ["ticket_id", "event_type"],
    )

    op.create_table(
        "processed_events",
        sa.Column("event_id", sa.Text, primary_key=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
    )


def downgrade() -> None:
    op.drop_table("processed_events")
    op.drop_index("agent_behavior_log_ticket_event_idx", table_name="agent_behavior_log")
    op.drop_index("agent_behavior_log_event_id_key", table_name="agent_behavior_log")
    op.drop_table("agent_behavior_log")
