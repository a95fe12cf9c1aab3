"""Tests for projecting chat messages into upstream history."""

import json

import pytest

from you2api.core import project_history
from you2api.core.history import project_message


def test_single_user_message():
    history = project_history([{"role": "user", "content": "Hi"}])
    assert history.records == ({"question": "Hi", "answer": ""},)
    assert history.query == "Hi"
    assert history.past_chat_length == 0


def test_assistant_message_fills_answer():
    assert project_message({"role": "assistant", "content": "Hello"}) == {
        "question": "",
        "answer": "Hello",
    }


@pytest.mark.parametrize("role", ["user", "system", "tool", "developer", ""])
def test_non_assistant_roles_fill_question(role):
    assert project_message({"role": role, "content": "text"}) == {
        "question": "text",
        "answer": "",
    }


def test_conversation_preserves_length_and_order():
    messages = [
        {"role": "system", "content": "Be brief"},
        {"role": "user", "content": "Capital of France?"},
        {"role": "assistant", "content": "Paris"},
        {"role": "user", "content": "And Spain?"},
    ]
    history = project_history(messages)

    assert len(history.records) == len(messages)
    assert [record["question"] or record["answer"] for record in history.records] == [
        message["content"] for message in messages
    ]
    for message, record in zip(messages, history.records):
        filled = [key for key in ("question", "answer") if record[key]]
        expected = "answer" if message["role"] == "assistant" else "question"
        assert filled == [expected]

    assert history.query == "And Spain?"
    assert history.past_chat_length == 3


def test_final_assistant_message_is_still_the_query():
    history = project_history(
        [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
        ]
    )
    assert history.query == "Hello"
    assert history.records[-1] == {"question": "", "answer": "Hello"}


def test_empty_messages_are_rejected():
    with pytest.raises(ValueError):
        project_history([])


def test_to_json_is_compact_and_keeps_unicode():
    history = project_history([{"role": "user", "content": "你好"}])
    encoded = history.to_json()
    assert encoded == '[{"question":"你好","answer":""}]'
    assert json.loads(encoded) == [{"question": "你好", "answer": ""}]
