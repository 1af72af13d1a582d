from ai_coder.providers.messages import tasks_to_messages
from ai_coder.storage.models import Task

PROMPT = "You are a coding agent."


def test_empty_history_yields_system_turn_only() -> None:
    messages = tasks_to_messages([], PROMPT)

    assert len(messages) == 1
    assert messages[0].role == "system"
    assert messages[0].content == PROMPT


def test_self_issued_ask_becomes_assistant_text() -> None:
    history = [Task(type="ask", tool_call_id="", message="Proceed?")]

    messages = tasks_to_messages(history, PROMPT)

    assert [message.role for message in messages] == ["system", "assistant"]
    assert messages[1].content == "Proceed?"
    assert messages[1].tool_calls == []


def test_tool_call_task_becomes_call_and_result_pair() -> None:
    history = [
        Task(
            type="terminal",
            tool_call_id="abc",
            args='{"cmd":"ls"}',
            results="file1\nfile2",
        )
    ]

    messages = tasks_to_messages(history, PROMPT)

    assert [message.role for message in messages] == ["system", "assistant", "tool"]
    call = messages[1].tool_calls[0]
    assert call.id == "abc"
    assert call.function.name == "terminal"
    assert call.function.arguments == '{"cmd":"ls"}'
    assert messages[2].tool_call_id == "abc"
    assert messages[2].name == "terminal"
    assert messages[2].content == "file1\nfile2"


def test_pending_tool_result_is_empty() -> None:
    history = [Task(type="terminal", tool_call_id="abc", args="{}", results=None)]

    messages = tasks_to_messages(history, PROMPT)

    assert messages[2].content == ""


def test_model_issued_ask_is_rendered_as_tool_call() -> None:
    history = [Task(type="ask", tool_call_id="call_9", args="{}", message="Which branch?")]

    messages = tasks_to_messages(history, PROMPT)

    assert [message.role for message in messages] == ["system", "assistant", "tool"]
    assert messages[1].content is None


def test_input_task_renders_system_prompt_as_user_turn() -> None:
    history = [Task(type="input", message="Build me a todo app")]

    messages = tasks_to_messages(history, PROMPT)

    assert [message.role for message in messages] == ["system", "user"]
    assert messages[1].content == PROMPT


def test_untranslatable_tasks_are_skipped() -> None:
    history = [
        Task(type="terminal", tool_call_id=None, args='{"input":"ls"}'),
        Task(type=None, message="broken record"),
        Task(type="done", message="All done"),
    ]

    messages = tasks_to_messages(history, PROMPT)

    assert len(messages) == 1


def test_turn_order_follows_task_order() -> None:
    history = [
        Task(type="input", message="Start"),
        Task(type="terminal", tool_call_id="t1", args='{"input":"ls"}', results="a"),
        Task(type="ask", message="Error. What should I do next?"),
        Task(type="code", tool_call_id="t2", args='{"path":"a.py"}', results="print()"),
    ]

    messages = tasks_to_messages(history, PROMPT)
    again = tasks_to_messages(history, PROMPT)

    assert [message.role for message in messages] == [
        "system",
        "user",
        "assistant",
        "tool",
        "assistant",
        "assistant",
        "tool",
    ]
    assert [message.tool_call_id for message in messages if message.role == "tool"] == [
        "t1",
        "t2",
    ]
    assert messages == again


def test_payload_matches_chat_completions_wire_format() -> None:
    history = [Task(type="terminal", tool_call_id="abc", args='{"cmd":"ls"}', results="ok")]

    payload = [message.to_payload() for message in tasks_to_messages(history, PROMPT)]

    assert payload[0] == {"role": "system", "content": PROMPT}
    assert payload[1] == {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {
                "id": "abc",
                "type": "function",
                "function": {"name": "terminal", "arguments": '{"cmd":"ls"}'},
            }
        ],
    }
    assert payload[2] == {
        "role": "tool",
        "content": "ok",
        "tool_call_id": "abc",
        "name": "terminal",
    }
