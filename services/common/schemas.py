WEBHOOK_EVENT_TYPES = ["ticket-message-created", "ticket-updated", "satisfaction-created"]

LOG_EVENT_TYPES = ["ticket-message-created", "ticket-closed", "ticket-assigned"]

# Helpdesk templates render most values as strings, so ids accept both.
_ID = {"type": ["integer", "number", "string", "null"]}
_TEXT = {"type": ["string", "null"]}

_USER_SCHEMA = {
    "type": ["object", "null"],
    "properties": {
        "id": _ID,
        "name": _TEXT,
        "email": _TEXT,
    },
    "additionalProperties": True,
}

WEBHOOK_PAYLOAD_SCHEMA = {
    "type": "object",
    "required": ["event_type"],
    "properties": {
        "event_type": {"type": "string", "minLength": 1},
        "ticket": {
            "type": ["object", "null"],
            "properties": {
                "id": _ID,
                "subject": _TEXT,
                "status": _TEXT,
                "channel": _TEXT,
                "created_datetime": _TEXT,
                "tags": {
                    "type": ["array", "null"],
                    "items": {
                        "type": "object",
                        "properties": {"name": _TEXT},
                    },
                },
            },
            "additionalProperties": True,
        },
        "message": {
            "type": ["object", "null"],
            "properties": {
                "id": _ID,
                "body_text": _TEXT,
                "created_datetime": _TEXT,
                "sender": _USER_SCHEMA,
                "source": {
                    "type": ["object", "null"],
                    "properties": {"type": _TEXT},
                },
                "macros": {
                    "type": ["array", "null"],
                    "items": {
                        "type": "object",
                        "properties": {"id": _ID, "name": _TEXT},
                    },
                },
            },
            "additionalProperties": True,
        },
        "satisfaction": {
            "type": ["object", "null"],
            "properties": {
                "score": {"type": ["integer", "number", "string", "null"]},
                "created_datetime": _TEXT,
            },
            "additionalProperties": True,
        },
        "assignee_user": _USER_SCHEMA,
    },
    "additionalProperties": True,
}

AGENT_BEHAVIOR_ROW_SCHEMA = {
    "type": "object",
    "required": ["event_id", "event_type", "ticket_id", "raw_payload"],
    "properties": {
        "event_id": {"type": "string", "minLength": 5},
        "event_type": {"type": "string", "enum": LOG_EVENT_TYPES},
        "ticket_id": {"type": ["integer", "number", "null"]},
        "ticket_tags": {"type": ["array", "null"], "items": {"type": "string"}},
        "agent_id": {"type": ["integer", "number", "null"]},
        "response_char_count": {"type": ["integer", "null"], "minimum": 0},
        "is_macro": {"type": ["boolean", "null"]},
        "message_position": {"type": ["integer", "null"], "minimum": 1},
        "time_to_first_response_min": {"type": ["number", "null"]},
        "touches_to_resolution": {"type": ["integer", "null"], "minimum": 0},
        "csat_score": {"type": ["integer", "null"], "minimum": 1, "maximum": 5},
        "raw_payload": {"type": "object"},
    },
    "additionalProperties": True,
}
