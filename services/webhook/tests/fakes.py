from contextlib import contextmanager

from services.common.behavior_store import REPLY_EVENT


class FakeStore:
    """In-memory stand-in for BehaviorStore."""

    def __init__(self):
        self.rows: list[dict] = []
        self.processed: set[str] = set()
        self.locked: list = []
        self.transactions = 0
        self._next_id = 1

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield self

    def lock_ticket(self, ticket_id):
        self.locked.append(ticket_id)

    def already_processed(self, event_id):
        return event_id in self.processed

    def mark_processed(self, event_id):
        self.processed.add(event_id)

    def _matching(self, ticket_id, event_type):
        return [r for r in self.rows if r["ticket_id"] == ticket_id and r["event_type"] == event_type]

    def prior_event_ids(self, ticket_id, event_type=REPLY_EVENT):
        return [r["id"] for r in self._matching(ticket_id, event_type)]

    def count_events(self, ticket_id, event_type=REPLY_EVENT):
        return len(self._matching(ticket_id, event_type))

    def insert_event(self, record):
        if any(r["event_id"] == record["event_id"] for r in self.rows):
            return False
        self.rows.append({"id": self._next_id, **record})
        self._next_id += 1
        return True

    def enrich_closure(self, ticket_id, touches, resolved_at):
        rows = self._matching(ticket_id, REPLY_EVENT)
        for row in rows:
            row["touches_to_resolution"] = touches
            row["resolved_at"] = resolved_at
        return len(rows)

    def set_csat(self, ticket_id, score):
        rows = [r for r in self.rows if r["ticket_id"] == ticket_id]
        for row in rows:
            row["csat_score"] = score
        return len(rows)

    def by_type(self, event_type):
        return [r for r in self.rows if r["event_type"] == event_type]


def make_ticket(ticket_id=500, **overrides):
    ticket = {
        "id": ticket_id,
        "subject": "Where is my order?",
        "status": "open",
        "channel": "email",
        "created_datetime": "2026-03-01T09:50:00Z",
        "tags": [{"name": "spam"}, {"name": "shipping-delay"}],
    }
    ticket.update(overrides)
    return ticket


def message_event(message_id, created, ticket=None, source_type="agent", **message_overrides):
    message = {
        "id": message_id,
        "body_text": "Thanks for reaching out, your order ships tomorrow.",
        "created_datetime": created,
        "sender": {"id": "77", "name": "Spencer", "email": "spencer@example.com"},
        "source": {"type": source_type},
        "macros": [],
    }
    message.update(message_overrides)
    return {
        "event_type": "ticket-message-created",
        "ticket": ticket or make_ticket(),
        "message": message,
    }


def closed_event(ticket=None, **ticket_overrides):
    base = ticket or make_ticket()
    return {
        "event_type": "ticket-updated",
        "ticket": {**base, "status": "closed", **ticket_overrides},
    }
