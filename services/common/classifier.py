import math
import re
from dataclasses import dataclass
from datetime import UTC, datetime

# System/noise tags skipped when picking a ticket category
SYSTEM_TAGS = frozenset({"auto-close", "spam", "ai-draft", "ai-reviewed"})

AGENT_SOURCE_TYPES = frozenset({"agent", "email"})

INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def tag_names(tags) -> list[str]:
    if not tags:
        return []
    names = []
    for tag in tags:
        name = tag.get("name") if isinstance(tag, dict) else None
        if name:
            names.append(name)
    return names


def extract_category(tags) -> str | None:
    for name in tag_names(tags):
        if name not in SYSTEM_TAGS:
            return name
    return None


def is_agent_message(message: dict | None) -> bool:
    if not message:
        return False
    source = message.get("source") or {}
    source_type = (source.get("type") or "").lower()
    return source_type in AGENT_SOURCE_TYPES


def to_num(value) -> int | float | None:
    """Coerce an id the helpdesk may send as a string. None means unknown, not zero."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if INTEGER_RE.fullmatch(value):
            return int(value)
    elif isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def diff_minutes(start: str, end: str) -> float:
    started = parse_timestamp(start)
    ended = parse_timestamp(end)
    if started is None or ended is None:
        raise ValueError(f"Invalid timestamps: {start!r}, {end!r}")
    return (ended - started).total_seconds() / 60


def first_macro(message: dict | None) -> dict | None:
    macros = (message or {}).get("macros") or []
    return macros[0] if macros else None


@dataclass(frozen=True)
class MessagePolicy:
    """Decides which ticket messages are logged as reply events.

    With ``agent_only`` off every message source is logged (customer, rule and
    workflow messages included). Confirm the source.type values the helpdesk
    sends before switching it on.
    """

    agent_only: bool = False

    def accepts(self, message: dict | None) -> bool:
        if not message:
            return False
        if not self.agent_only:
            return True
        return is_agent_message(message)


def classify_ticket(ticket: dict) -> dict:
    names = tag_names(ticket.get("tags"))
    return {
        "ticket_id": to_num(ticket.get("id")),
        "ticket_subject": ticket.get("subject"),
        "ticket_channel": ticket.get("channel"),
        "ticket_category": extract_category(ticket.get("tags")),
        "ticket_tags": names or None,
        "ticket_created_at": ticket.get("created_datetime"),
    }


def classify_actor(user: dict | None) -> dict:
    user = user or {}
    return {
        "agent_id": to_num(user.get("id")),
        "agent_name": user.get("name"),
        "agent_email": user.get("email"),
    }


def classify_message(message: dict) -> dict:
    body = message.get("body_text")
    macro = first_macro(message)
    return {
        **classify_actor(message.get("sender")),
        "response_text": body,
        "response_char_count": len(body) if body is not None else None,
        "is_macro": macro is not None,
        "macro_id": to_num(macro.get("id")) if macro else None,
        "macro_name": macro.get("name") if macro else None,
    }
