import math

import pytest

from services.common.classifier import (
    MessagePolicy,
    classify_message,
    classify_ticket,
    diff_minutes,
    extract_category,
    first_macro,
    is_agent_message,
    tag_names,
    to_num,
)

# ── extract_category ─────────────────────────────────────────────────


def test_extract_category_skips_system_tags():
    tags = [{"name": "spam"}, {"name": "shipping-delay"}, {"name": "returns"}]
    assert extract_category(tags) == "shipping-delay"


def test_extract_category_none_when_only_noise():
    assert extract_category([{"name": "spam"}, {"name": "auto-close"}]) is None
    assert extract_category([{"name": "ai-draft"}, {"name": "ai-reviewed"}]) is None


@pytest.mark.parametrize("tags", [None, []])
def test_extract_category_none_without_tags(tags):
    assert extract_category(tags) is None


def test_tag_names_ignores_nameless_entries():
    assert tag_names([{"name": "a"}, {}, {"name": None}, {"name": "b"}]) == ["a", "b"]


# ── is_agent_message ─────────────────────────────────────────────────


@pytest.mark.parametrize("source_type", ["agent", "AGENT", "email", "Email"])
def test_agent_sources_are_agent_messages(source_type):
    assert is_agent_message({"source": {"type": source_type}}) is True


@pytest.mark.parametrize("source_type", ["customer", "rule", "workflow", "", None])
def test_other_sources_are_not_agent_messages(source_type):
    assert is_agent_message({"source": {"type": source_type}}) is False


def test_missing_message_or_source_is_not_agent_message():
    assert is_agent_message(None) is False
    assert is_agent_message({}) is False


def test_policy_logs_every_source_by_default():
    policy = MessagePolicy()
    assert policy.accepts({"source": {"type": "customer"}}) is True
    assert policy.accepts(None) is False


def test_policy_agent_only_filters_customers():
    policy = MessagePolicy(agent_only=True)
    assert policy.accepts({"source": {"type": "customer"}}) is False
    assert policy.accepts({"source": {"type": "agent"}}) is True


# ── to_num ───────────────────────────────────────────────────────────


def test_to_num_coerces_numeric_strings():
    assert to_num("1234") == 1234
    assert isinstance(to_num("1234"), int)
    assert to_num(" 42 ") == 42
    assert to_num("12.5") == 12.5
    assert to_num(7) == 7


@pytest.mark.parametrize("value", ["abc", None, "", "   ", True, "nan", "inf", [1], {}])
def test_to_num_returns_none_for_non_numeric(value):
    assert to_num(value) is None


def test_to_num_zero_is_not_unknown():
    assert to_num("0") == 0


def test_to_num_keeps_large_integer_ids_exact():
    big = 2**53 + 1
    assert to_num(str(big)) == big
    assert to_num(big) == big
    assert to_num("-12") == -12
    assert to_num("+-5") is None


# ── diff_minutes ─────────────────────────────────────────────────────


def test_diff_minutes_returns_fractional_minutes():
    assert diff_minutes("2026-03-01T09:50:00Z", "2026-03-01T10:00:00Z") == 10.0
    assert math.isclose(
        diff_minutes("2026-03-01T10:00:00Z", "2026-03-01T10:00:30Z"), 0.5
    )


def test_diff_minutes_handles_offsets_and_naive_utc():
    assert diff_minutes("2026-03-01T10:00:00+02:00", "2026-03-01T08:30:00") == 30.0


def test_diff_minutes_can_be_negative():
    assert diff_minutes("2026-03-01T10:00:00Z", "2026-03-01T09:00:00Z") == -60.0


def test_diff_minutes_rejects_garbage():
    with pytest.raises(ValueError):
        diff_minutes("yesterday", "2026-03-01T10:00:00Z")


# ── classify ─────────────────────────────────────────────────────────


def test_classify_ticket_normalizes_reference():
    fields = classify_ticket(
        {
            "id": "500",
            "subject": "Late order",
            "channel": "chat",
            "created_datetime": "2026-03-01T09:50:00Z",
            "tags": [{"name": "spam"}, {"name": "shipping-delay"}],
        }
    )
    assert fields == {
        "ticket_id": 500,
        "ticket_subject": "Late order",
        "ticket_channel": "chat",
        "ticket_category": "shipping-delay",
        "ticket_tags": ["spam", "shipping-delay"],
        "ticket_created_at": "2026-03-01T09:50:00Z",
    }


def test_classify_ticket_without_tags_stores_null_tags():
    assert classify_ticket({"id": 1})["ticket_tags"] is None


def test_classify_message_with_macro():
    fields = classify_message(
        {
            "body_text": "Hello!",
            "sender": {"id": "9", "name": "Tyler", "email": "t@example.com"},
            "macros": [{"id": "31", "name": "Greeting"}],
        }
    )
    assert fields["agent_id"] == 9
    assert fields["response_char_count"] == 6
    assert fields["is_macro"] is True
    assert fields["macro_id"] == 31
    assert fields["macro_name"] == "Greeting"


def test_classify_message_without_sender_or_body():
    fields = classify_message({})
    assert fields["agent_id"] is None
    assert fields["agent_name"] is None
    assert fields["response_text"] is None
    assert fields["response_char_count"] is None
    assert fields["is_macro"] is False
    assert fields["macro_id"] is None


def test_first_macro():
    assert first_macro({"macros": [{"id": 1}, {"id": 2}]}) == {"id": 1}
    assert first_macro({"macros": []}) is None
    assert first_macro(None) is None
