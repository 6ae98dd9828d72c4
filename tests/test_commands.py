# tests/test_commands.py

from __future__ import annotations

import pytest

from tasktrack.cli.commands import LOGIN_HINT, CommandRegistry, registry
from tasktrack.tasks.task_models import TaskPriority


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    async def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_protected_command_is_refused_without_session(state, task_api) -> None:
    reply = await registry.handle(state, "/tasks")

    assert reply == LOGIN_HINT
    assert state.router.current == "login"
    assert task_api.calls == []


@pytest.mark.asyncio
async def test_login_then_tasks_lists_board(state) -> None:
    notes: list[str] = []
    reply = await registry.handle(state, "/login alice secret", emit=notes.append)

    assert reply.startswith("Logged in as alice.")
    assert "#1 [TODO] (HIGH) Write report" in reply
    assert "(done in 3 hours)" in reply
    assert state.router.current == "tasks"
    assert notes and "alice" in notes[0]


@pytest.mark.asyncio
async def test_login_failure_shows_backend_message(state) -> None:
    reply = await registry.handle(state, "/login alice wrong")

    assert reply == "Login failed: Bad credentials"
    assert not state.sessions.is_authenticated()


@pytest.mark.asyncio
async def test_search_and_filter_narrow_the_board(state) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/search report")
    assert "Write report" in reply and "Fix bug" in reply and "Buy milk" not in reply

    reply = await registry.handle(state, "/filter status DONE")
    assert "Fix bug" in reply and "Write report" not in reply

    reply = await registry.handle(state, "/filter priority urgent")
    assert "Unknown priority filter" in reply

    reply = await registry.handle(state, "/filter reset")
    assert "Tasks (3 of 3)" in reply


@pytest.mark.asyncio
async def test_new_set_save_creates_task(state, task_api) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/new")
    assert "New task:" in reply

    assert "Title is required" in await registry.handle(state, "/save")

    await registry.handle(state, "/set title Call plumber")
    await registry.handle(state, "/set priority high")
    reply = await registry.handle(state, "/save")

    assert reply.startswith("Saved task #4.")
    assert "Call plumber" in reply
    assert task_api.tasks[-1].priority == TaskPriority.HIGH


@pytest.mark.asyncio
async def test_save_failure_keeps_form(state, task_api) -> None:
    await registry.handle(state, "/login alice secret")
    await registry.handle(state, "/new Call plumber")
    task_api.fail = True

    reply = await registry.handle(state, "/save")

    assert reply == "Failed to create task: create_task failed"
    assert state.composer.draft.title == "Call plumber"


@pytest.mark.asyncio
async def test_delete_asks_for_confirmation(state, task_api) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/delete 2")
    assert "Are you sure" in reply
    assert len(task_api.tasks) == 3

    reply = await registry.handle(state, "/rm 2 yes")
    assert reply.startswith('Deleted "Buy milk".')
    assert [t.id for t in state.board.tasks] == [1, 3]


@pytest.mark.asyncio
async def test_parse_fills_form_from_plain_text(state, ai_api) -> None:
    await registry.handle(state, "/login alice secret")
    await registry.handle(state, "/new")

    reply = await registry.handle(state, "/parse buy groceries tomorrow, urgent")

    assert reply.startswith("AI filled in the form.")
    assert state.composer.draft.title == "Buy groceries"
    assert state.composer.draft.priority == TaskPriority.HIGH


@pytest.mark.asyncio
async def test_ai_commands_degrade_when_unavailable(state, ai_api) -> None:
    ai_api.available = False
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/new")
    assert "AI:" not in reply

    assert "not available" in await registry.handle(state, "/nl")
    assert "not available" in await registry.handle(state, "/parse something")
    assert await registry.handle(state, "/ai") == "AI: unavailable (manual entry only)."


@pytest.mark.asyncio
async def test_logout_drops_back_to_login(state) -> None:
    await registry.handle(state, "/login alice secret")

    assert await registry.handle(state, "/logout") == "Logged out."
    assert state.router.current == "login"
    assert state.board.tasks == []
    assert await registry.handle(state, "/stats") == LOGIN_HINT


@pytest.mark.asyncio
async def test_stats_renders_charts_and_insight(state) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/stats")

    assert "Total: 3  Completed: 1  Pending: 2" in reply
    assert "By status: To Do: 1, In Progress: 1, Done: 1" in reply
    assert "AI insight: You finish most tasks within a day." in reply
    assert state.router.current == "analytics"


@pytest.mark.asyncio
async def test_suggest_lists_ai_ideas(state, ai_api) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/suggest")
    assert reply == "Suggested tasks:\n  - Plan meals\n  - Clean fridge\nNice streak."

    ai_api.fail = True
    assert await registry.handle(state, "/suggest") == "No suggestions right now."


@pytest.mark.asyncio
async def test_status_and_priority_shortcuts(state) -> None:
    await registry.handle(state, "/login alice secret")

    reply = await registry.handle(state, "/status in_progress")
    assert "Buy milk" in reply and "Write report" not in reply

    reply = await registry.handle(state, "/priority HIGH")
    assert "No tasks match." in reply

    assert (await registry.handle(state, "/status")).startswith("Usage: /filter")
