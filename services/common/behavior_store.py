from collections.abc import Sequence
from contextlib import contextmanager
from datetime import datetime

from psycopg import sql
from psycopg.types.json import Jsonb

LOG_TABLE = "agent_behavior_log"
REPLY_EVENT = "ticket-message-created"

LOG_COLUMNS = [
    "id",
    "created_at",
    "event_id",
    "event_type",
    "ticket_id",
    "ticket_subject",
    "ticket_channel",
    "ticket_category",
    "ticket_tags",
    "ticket_created_at",
    "agent_id",
    "agent_name",
    "agent_email",
    "response_char_count",
    "is_macro",
    "macro_id",
    "macro_name",
    "message_position",
    "time_to_first_response_min",
    "touches_to_resolution",
    "csat_score",
    "resolved_at",
]

PULSE_COLUMNS = [
    "id",
    "created_at",
    "date_range_start",
    "date_range_end",
    "ticket_count",
    "open_count",
    "closed_count",
    "resolution_avg_min",
    "resolution_p50_min",
    "resolution_p90_min",
    "tickets_analyzed",
    "spam_pct",
    "unassigned_pct",
    "channel_email",
    "channel_chat",
    "workload",
    "top_questions",
    "tags",
    "ops_notes",
]

_PULSE_JSON_COLUMNS = {"workload", "top_questions", "tags", "ops_notes"}


def _rows_to_dicts(columns: Sequence[str], rows: Sequence[tuple]) -> list[dict]:
    return [dict(zip(columns, row, strict=True)) for row in rows]


class BehaviorStore:
    """Reads and writes the agent behavior log over a psycopg connection."""

    def __init__(self, conn):
        self.conn = conn

    @contextmanager
    def transaction(self):
        with self.conn.transaction():
            yield self

    def lock_ticket(self, ticket_id) -> None:
        # Serializes writers for one ticket until the surrounding transaction ends.
        self.conn.execute(
            "SELECT pg_advisory_xact_lock(hashtext(%s))",
            (f"{LOG_TABLE}:{ticket_id}",),
        )

    def already_processed(self, event_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM processed_events WHERE event_id=%s", (event_id,)
        ).fetchone()
        return row is not None

    def mark_processed(self, event_id: str) -> None:
        self.conn.execute(
            "INSERT INTO processed_events(event_id) VALUES (%s) ON CONFLICT DO NOTHING",
            (event_id,),
        )

    def prior_event_ids(self, ticket_id, event_type: str = REPLY_EVENT) -> list[int]:
        rows = self.conn.execute(
            f"SELECT id FROM {LOG_TABLE} WHERE ticket_id=%s AND event_type=%s ORDER BY id",
            (ticket_id, event_type),
        ).fetchall()
        return [row[0] for row in rows]

    def count_events(self, ticket_id, event_type: str = REPLY_EVENT) -> int:
        row = self.conn.execute(
            f"SELECT COUNT(*) FROM {LOG_TABLE} WHERE ticket_id=%s AND event_type=%s",
            (ticket_id, event_type),
        ).fetchone()
        return row[0] if row else 0

    def insert_event(self, record: dict) -> bool:
        values = dict(record)
        if values.get("raw_payload") is not None:
            values["raw_payload"] = Jsonb(values["raw_payload"])
        columns = list(values)
        query = sql.SQL(
            "INSERT INTO {table} ({columns}) VALUES ({values}) ON CONFLICT (event_id) DO NOTHING"
        ).format(
            table=sql.Identifier(LOG_TABLE),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        cur = self.conn.execute(query, [values[c] for c in columns])
        return cur.rowcount != 0

    def enrich_closure(self, ticket_id, touches: int, resolved_at: datetime) -> int:
        cur = self.conn.execute(
            f"UPDATE {LOG_TABLE} SET touches_to_resolution=%s, resolved_at=%s"
            " WHERE ticket_id=%s AND event_type=%s",
            (touches, resolved_at, ticket_id, REPLY_EVENT),
        )
        return cur.rowcount

    def set_csat(self, ticket_id, score: int) -> int:
        cur = self.conn.execute(
            f"UPDATE {LOG_TABLE} SET csat_score=%s WHERE ticket_id=%s",
            (score, ticket_id),
        )
        return cur.rowcount

    def list_events(
        self,
        limit: int = 100,
        event_type: str | None = None,
        ticket_id: int | None = None,
    ) -> list[dict]:
        conditions: list[str] = []
        params: list[object] = []
        if event_type:
            conditions.append("event_type = %s")
            params.append(event_type)
        if ticket_id is not None:
            conditions.append("ticket_id = %s")
            params.append(ticket_id)
        where_clause = "WHERE " + " AND ".join(conditions) if conditions else ""
        params.append(limit)

        rows = self.conn.execute(
            f"""
            SELECT {", ".join(LOG_COLUMNS)}
            FROM {LOG_TABLE}
            {where_clause}
            ORDER BY created_at DESC, id DESC
            LIMIT %s
            """,
            params,
        ).fetchall()
        return _rows_to_dicts(LOG_COLUMNS, rows)

    def count_pulse_checks(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM pulse_checks").fetchone()
        return row[0] if row else 0

    def list_pulse_checks(self, limit: int = 30) -> list[dict]:
        rows = self.conn.execute(
            f"SELECT {', '.join(PULSE_COLUMNS)} FROM pulse_checks"
            " ORDER BY created_at DESC LIMIT %s",
            (limit,),
        ).fetchall()
        return _rows_to_dicts(PULSE_COLUMNS, rows)

    def insert_pulse_checks(self, records: list[dict]) -> int:
        inserted = 0
        for record in records:
            columns = [c for c in PULSE_COLUMNS if c in record]
            params = [
                Jsonb(record[c]) if c in _PULSE_JSON_COLUMNS else record[c] for c in columns
            ]
            query = sql.SQL("INSERT INTO pulse_checks ({columns}) VALUES ({values})").format(
                columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
                values=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
            )
            self.conn.execute(query, params)
            inserted += 1
        return inserted
