"""Replay a reply → reply → close → CSAT sequence against a running service."""

from __future__ import annotations

import argparse
import json
import time
from urllib import parse, request


def _post_json(url: str, payload: dict) -> dict:
    data = json.dumps(payload).encode("utf-8")
    req = request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with request.urlopen(req, timeout=30) as resp:
        return json.loads(resp.read().decode("utf-8"))


def _sample_events(ticket_id: int) -> list[dict]:
    ticket = {
        "id": str(ticket_id),
        "subject": "Where is my order?",
        "status": "open",
        "channel": "email",
        "created_datetime": "2026-03-01T09:50:00Z",
        "tags": [{"name": "spam"}, {"name": "shipping-delay"}],
    }
    agent = {"id": "77", "name": "Spencer", "email": "spencer@example.com"}
    return [
        {
            "event_type": "ticket-message-created",
            "ticket": ticket,
            "message": {
                "id": f"{ticket_id}01",
                "body_text": "Thanks for reaching out, checking on this now.",
                "created_datetime": "2026-03-01T10:00:00Z",
                "sender": agent,
                "source": {"type": "agent"},
            },
        },
        {
            "event_type": "ticket-message-created",
            "ticket": ticket,
            "message": {
                "id": f"{ticket_id}02",
                "body_text": "Your order ships tomorrow.",
                "created_datetime": "2026-03-01T10:05:00Z",
                "sender": agent,
                "source": {"type": "agent"},
                "macros": [{"id": "12", "name": "Shipping ETA"}],
            },
        },
        {"event_type": "ticket-updated", "ticket": {**ticket, "status": "closed"}},
        {
            "event_type": "satisfaction-created",
            "ticket": ticket,
            "satisfaction": {"score": "5"},
        },
    ]


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--secret", required=True)
    parser.add_argument("--ticket-id", type=int, default=int(time.time()))
    args = parser.parse_args()

    url = f"{args.base_url}/webhooks/gorgias/events?{parse.urlencode({'secret': args.secret})}"
    for event in _sample_events(args.ticket_id):
        print(f"{event['event_type']}: {_post_json(url, event)}")

    logs = json.loads(
        request.urlopen(
            f"{args.base_url}/agent-behavior?ticket_id={args.ticket_id}", timeout=30
        ).read()
    )
    for row in logs["events"]:
        print(
            f"  {row['event_id']} position={row['message_position']}"
            f" first_response={row['time_to_first_response_min']}"
            f" touches={row['touches_to_resolution']} csat={row['csat_score']}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
