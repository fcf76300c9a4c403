from services.common.behavior_store import REPLY_EVENT


def _avg(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def _rate(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def compute_agent_stats(rows: list[dict]) -> list[dict]:
    """Per-agent reply statistics from behavior log rows, busiest agent first."""
    agents: dict[str, dict] = {}

    for row in rows:
        name = row.get("agent_name")
        if not name or row.get("event_type") != REPLY_EVENT:
            continue

        acc = agents.setdefault(
            name,
            {
                "replies": 0,
                "tickets": set(),
                "first_response_samples": [],
                "macro_uses": 0,
                "csat_scores": [],
                "touch_samples": [],
            },
        )
        acc["replies"] += 1
        acc["tickets"].add(row.get("ticket_id"))
        if row.get("time_to_first_response_min") is not None:
            acc["first_response_samples"].append(row["time_to_first_response_min"])
        if row.get("is_macro"):
            acc["macro_uses"] += 1
        if row.get("csat_score") is not None:
            acc["csat_scores"].append(row["csat_score"])
        if row.get("touches_to_resolution") is not None:
            acc["touch_samples"].append(row["touches_to_resolution"])

    stats = [
        {
            "name": name,
            "replies": acc["replies"],
            "tickets": len(acc["tickets"]),
            "first_responses": len(acc["first_response_samples"]),
            "avg_first_response_min": _avg(acc["first_response_samples"]),
            "macro_uses": acc["macro_uses"],
            "macro_rate": _rate(acc["macro_uses"], acc["replies"]),
            "avg_csat": _avg(acc["csat_scores"]),
            "avg_touches": _avg(acc["touch_samples"]),
        }
        for name, acc in agents.items()
    ]
    return sorted(stats, key=lambda s: s["replies"], reverse=True)


def summarize_replies(rows: list[dict]) -> dict:
    replies = [r for r in rows if r.get("event_type") == REPLY_EVENT]
    first_responses = [
        r["time_to_first_response_min"]
        for r in replies
        if r.get("time_to_first_response_min") is not None
    ]
    macro_replies = sum(1 for r in replies if r.get("is_macro"))
    return {
        "total_replies": len(replies),
        "avg_first_response_min": _avg(first_responses),
        "macro_rate": _rate(macro_replies, len(replies)),
    }
