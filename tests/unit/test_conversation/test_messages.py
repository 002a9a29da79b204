"""Unit tests for ai_chat_agent.conversation.messages."""

from __future__ import annotations

from ai_chat_agent.conversation.messages import Conversation, FunctionCall, Message


# ---------------------------------------------------------------------------
# Message serialisation
# ---------------------------------------------------------------------------


def test_function_message_serialises_role_name_content() -> None:
    msg = Message.function_result("lookup", '{"result":"y"}')

    assert msg.to_request_dict() == {
        "role": "function",
        "name": "lookup",
        "content": '{"result":"y"}',
    }


def test_function_message_without_name_or_content_uses_empty_strings() -> None:
    msg = Message(role="function", content=None)

    assert msg.to_request_dict() == {"role": "function", "name": "", "content": ""}


def test_assistant_function_request_serialises_null_content() -> None:
    call = FunctionCall(name="lookup", arguments='{"q":"x"}')
    msg = Message.function_request(call)

    assert msg.to_request_dict() == {
        "role": "assistant",
        "function_call": {"name": "lookup", "arguments": '{"q":"x"}'},
        "content": None,
    }


def test_regular_message_defaults_content_to_empty_string() -> None:
    assert Message(role="assistant", content=None).to_request_dict() == {
        "role": "assistant",
        "content": "",
    }


def test_from_dict_defaults_role_to_user() -> None:
    msg = Message.from_dict({"content": "Hi"})

    assert msg.role == "user"
    assert msg.to_request_dict() == {"role": "user", "content": "Hi"}


def test_from_dict_parses_function_call() -> None:
    msg = Message.from_dict(
        {
            "role": "assistant",
            "content": None,
            "function_call": {"name": "lookup", "arguments": '{"q":"x"}'},
        }
    )

    assert msg.function_call == FunctionCall(name="lookup", arguments='{"q":"x"}')


def test_function_call_from_dict_defaults_arguments() -> None:
    assert FunctionCall.from_dict({"name": "ping"}).arguments == "{}"


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------


def test_serialize_preserves_insertion_order() -> None:
    convo = Conversation()
    convo.append(Message.user("one"))
    convo.append(Message.assistant("two"))
    convo.append({"role": "user", "content": "three"})

    contents = [m["content"] for m in convo.serialize_for_request()]

    assert contents == ["one", "two", "three"]


def test_serialize_prepends_non_empty_system_message() -> None:
    convo = Conversation([Message.user("Hello")])

    serialized = convo.serialize_for_request("Be brief.")

    assert serialized[0] == {"role": "system", "content": "Be brief."}
    assert serialized[1] == {"role": "user", "content": "Hello"}


def test_serialize_skips_empty_or_missing_system_message() -> None:
    convo = Conversation([Message.user("Hello")])

    assert convo.serialize_for_request("") == [{"role": "user", "content": "Hello"}]
    assert convo.serialize_for_request(None) == [{"role": "user", "content": "Hello"}]


def test_append_does_not_deduplicate() -> None:
    convo = Conversation()
    convo.append(Message.user("same"))
    convo.append(Message.user("same"))

    assert len(convo) == 2


def test_latest_on_empty_conversation_returns_none() -> None:
    assert Conversation().latest() is None


def test_latest_returns_assistant_reply_unchanged() -> None:
    convo = Conversation()
    convo.append(Message.user("Hello"))
    reply = Message.assistant("Hi there")
    convo.append(reply)

    assert convo.latest() is reply


def test_messages_view_is_a_snapshot() -> None:
    convo = Conversation([Message.user("a")])
    snapshot = convo.messages
    convo.append(Message.user("b"))

    assert len(snapshot) == 1
    assert len(convo.messages) == 2
