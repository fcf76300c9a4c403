from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from services.common.classifier import diff_minutes, parse_timestamp


@dataclass(frozen=True)
class ReplyMetrics:
    is_first_reply: bool
    message_position: int
    first_response_minutes: float | None


def round_tenth(minutes: float) -> float:
    # Ties round up: 10.25 -> 10.3.
    return float(Decimal(minutes).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def reply_metrics(
    prior_reply_count: int,
    ticket_created: str | None,
    message_created: str | None,
) -> ReplyMetrics:
    """Metrics for an incoming reply given the replies already persisted for its ticket."""
    prior = max(prior_reply_count, 0)
    is_first = prior == 0

    first_response = None
    if is_first and parse_timestamp(ticket_created) and parse_timestamp(message_created):
        first_response = round_tenth(diff_minutes(ticket_created, message_created))

    return ReplyMetrics(
        is_first_reply=is_first,
        message_position=prior + 1,
        first_response_minutes=first_response,
    )


def touches_to_resolution(reply_count_at_close: int | None) -> int:
    # Snapshot at closure time; later replies only count if another closure arrives.
    return max(reply_count_at_close or 0, 0)
