"""Routes classified helpdesk webhook events to agent behavior log writes.

Each branch runs in its own store transaction under a per-ticket advisory
lock, so reply positions and closure touch counts are read and written by a
single writer per ticket. Every branch derives an idempotency key and records
it in ``processed_events``; a redelivered event becomes a no-op.
"""

import hashlib
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from jsonschema import validate

from services.common.behavior_store import REPLY_EVENT
from services.common.calculator import reply_metrics, touches_to_resolution
from services.common.classifier import (
    MessagePolicy,
    classify_actor,
    classify_message,
    classify_ticket,
    to_num,
)
from services.common.schemas import AGENT_BEHAVIOR_ROW_SCHEMA

logger = logging.getLogger(__name__)

CLOSED_EVENT = "ticket-closed"
ASSIGNED_EVENT = "ticket-assigned"


@dataclass(frozen=True)
class DispatchResult:
    action: str
    event_id: str | None = None
    rows: int = 0


def content_digest(content) -> str:
    canonical = json.dumps(content, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def idempotency_key(prefix: str, ticket_id, content) -> str:
    return f"{prefix}-{ticket_id}-{content_digest(content)}"


def reply_key(ticket_id, message: dict) -> str:
    message_id = message.get("id")
    if message_id is not None and str(message_id).strip():
        return f"msg-{message_id}"
    return idempotency_key("msg", ticket_id, message)


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(UTC)


def _handle_message_created(store, payload: dict, policy: MessagePolicy, now) -> DispatchResult:
    ticket = payload.get("ticket")
    message = payload.get("message")
    if not ticket or not message:
        return DispatchResult("skipped")
    if not policy.accepts(message):
        return DispatchResult("filtered")

    ticket_fields = classify_ticket(ticket)
    ticket_id = ticket_fields["ticket_id"]
    if ticket_id is None:
        logger.warning("Reply for non-numeric ticket id skipped", extra={"ticket": ticket.get("id")})
        return DispatchResult("skipped")

    event_id = reply_key(ticket_id, message)
    with store.transaction():
        store.lock_ticket(ticket_id)
        if store.already_processed(event_id):
            return DispatchResult("duplicate", event_id)

        prior = store.prior_event_ids(ticket_id, REPLY_EVENT)
        metrics = reply_metrics(
            len(prior), ticket.get("created_datetime"), message.get("created_datetime")
        )
        record = {
            "event_id": event_id,
            "event_type": REPLY_EVENT,
            **ticket_fields,
            **classify_message(message),
            "message_position": metrics.message_position,
            "time_to_first_response_min": metrics.first_response_minutes,
            "raw_payload": payload,
        }
        validate(instance=record, schema=AGENT_BEHAVIOR_ROW_SCHEMA)
        inserted = store.insert_event(record)
        store.mark_processed(event_id)

    return DispatchResult("reply_logged" if inserted else "duplicate", event_id, int(inserted))


def _handle_closed(store, payload: dict, ticket: dict, ticket_id, now) -> DispatchResult:
    event_id = idempotency_key("close", ticket_id, payload)
    resolved_at = _now(now)
    with store.transaction():
        store.lock_ticket(ticket_id)
        if store.already_processed(event_id):
            return DispatchResult("duplicate", event_id)

        touches = touches_to_resolution(store.count_events(ticket_id, REPLY_EVENT))
        if touches > 0:
            rows = store.enrich_closure(ticket_id, touches, resolved_at)
            action = "closure_enriched"
        else:
            # Closed with no logged replies (spam auto-close etc.)
            record = {
                "event_id": event_id,
                "event_type": CLOSED_EVENT,
                **classify_ticket(ticket),
                "touches_to_resolution": 0,
                "resolved_at": resolved_at,
                "raw_payload": payload,
            }
            validate(instance=record, schema=AGENT_BEHAVIOR_ROW_SCHEMA)
            rows = int(store.insert_event(record))
            action = "closure_logged"
        store.mark_processed(event_id)

    return DispatchResult(action, event_id, rows)


def _handle_assigned(store, payload: dict, ticket: dict, ticket_id, assignee: dict) -> DispatchResult:
    event_id = idempotency_key("assign", ticket_id, payload)
    with store.transaction():
        store.lock_ticket(ticket_id)
        if store.already_processed(event_id):
            return DispatchResult("duplicate", event_id)

        record = {
            "event_id": event_id,
            "event_type": ASSIGNED_EVENT,
            **classify_ticket(ticket),
            **classify_actor(assignee),
            "raw_payload": payload,
        }
        validate(instance=record, schema=AGENT_BEHAVIOR_ROW_SCHEMA)
        inserted = store.insert_event(record)
        store.mark_processed(event_id)

    return DispatchResult("assignment_logged", event_id, int(inserted))


def _handle_ticket_updated(store, payload: dict, policy: MessagePolicy, now) -> DispatchResult:
    # ticket-updated covers both status changes and assignment changes
    ticket = payload.get("ticket")
    if not ticket:
        return DispatchResult("skipped")
    ticket_id = to_num(ticket.get("id"))
    if ticket_id is None:
        return DispatchResult("skipped")

    if ticket.get("status") == "closed":
        return _handle_closed(store, payload, ticket, ticket_id, now)

    assignee = payload.get("assignee_user")
    if assignee:
        return _handle_assigned(store, payload, ticket, ticket_id, assignee)
    return DispatchResult("skipped")


def _handle_satisfaction_created(store, payload: dict, policy: MessagePolicy, now) -> DispatchResult:
    ticket = payload.get("ticket")
    satisfaction = payload.get("satisfaction")
    if not ticket or not satisfaction:
        return DispatchResult("skipped")
    ticket_id = to_num(ticket.get("id"))
    score = to_num(satisfaction.get("score"))
    if ticket_id is None or not isinstance(score, int) or not 1 <= score <= 5:
        logger.warning(
            "Satisfaction event skipped",
            extra={"ticket": ticket.get("id"), "score": satisfaction.get("score")},
        )
        return DispatchResult("skipped")

    event_id = idempotency_key("csat", ticket_id, payload)
    with store.transaction():
        store.lock_ticket(ticket_id)
        if store.already_processed(event_id):
            return DispatchResult("duplicate", event_id)
        rows = store.set_csat(ticket_id, score)
        store.mark_processed(event_id)

    return DispatchResult("csat_recorded", event_id, rows)


Handler = Callable[..., DispatchResult]

HANDLERS: dict[str, Handler] = {
    "ticket-message-created": _handle_message_created,
    "ticket-updated": _handle_ticket_updated,
    "satisfaction-created": _handle_satisfaction_created,
}


def dispatch(
    store,
    payload: dict,
    policy: MessagePolicy | None = None,
    now: datetime | None = None,
) -> DispatchResult:
    handler = HANDLERS.get(payload.get("event_type"))
    if handler is None:
        return DispatchResult("ignored")
    return handler(store, payload, policy or MessagePolicy(), now)
