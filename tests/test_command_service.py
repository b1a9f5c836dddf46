from pathlib import Path

import pytest

from stampforge.app import BotApp
from stampforge.commands import messages
from stampforge.commands.service import Subcommand
from stampforge.domain.events import STAMPS_ADJUSTED
from stampforge.domain.exceptions import StorageError
from stampforge.domain.permissions import ActorCapabilities
from stampforge.storage.memory import InMemoryProgressStore
from stampforge.testing import ActorFactory, TestClient, app_fixture

actors = ActorFactory()


@pytest.fixture()
def client(memory_app: BotApp) -> TestClient:
    return TestClient(memory_app.commands)


@pytest.mark.asyncio()
async def test_member_cannot_manage_stamps(client: TestClient, memory_app: BotApp):
    result = await client.add(actors.member(), "target", 3)

    assert result.message == messages.NO_PERMISSION
    assert result.ephemeral
    assert (await memory_app.engine.view("community", "target")).count == 0
    assert memory_app.notifications.transcripts == []


@pytest.mark.asyncio()
async def test_add_reports_new_total_and_records_transcript(client: TestClient, memory_app: BotApp):
    owner = actors.owner("1")

    result = await client.add(owner, "42", 3)

    assert result.message == "✅ user-42 now has 3/10 on " + memory_app.catalog.lookup("og").name + "."
    assert not result.ephemeral
    (community_id, entry), = memory_app.notifications.transcripts
    assert community_id == "community"
    assert entry.actor == "user-1"
    assert entry.target == "user-42"
    assert entry.action == "➕ Added 3 (0 → 3)"
    assert entry.resulting_count == 3
    assert entry.image is not None
    assert memory_app.notifications.completions == []


@pytest.mark.asyncio()
async def test_add_defaults_to_one_stamp(client: TestClient, memory_app: BotApp):
    await client.add(actors.owner(), "42")

    assert (await memory_app.engine.view("community", "42")).count == 1


@pytest.mark.asyncio()
async def test_completion_notice_only_on_upward_crossing(client: TestClient, memory_app: BotApp):
    owner = actors.owner()

    await client.add(owner, "42", 9)
    await client.add(owner, "42", 2)
    await client.add(owner, "42", 1)

    (_, notice), = memory_app.notifications.completions
    assert notice.count == 11
    assert notice.goal == 10
    assert notice.image is not None
    assert memory_app.reward_sync.holds_reward("community", "42")


@pytest.mark.asyncio()
async def test_remove_below_goal_revokes_reward(client: TestClient, memory_app: BotApp):
    owner = actors.owner()
    await client.add(owner, "42", 10)
    assert memory_app.reward_sync.holds_reward("community", "42")

    result = await client.remove(owner, "42", 15)

    assert "0/10" in result.message
    assert not memory_app.reward_sync.holds_reward("community", "42")
    assert memory_app.notifications.transcripts[-1][1].action == "➖ Removed 15 (10 → 0)"


@pytest.mark.asyncio()
async def test_reset_zeroes_progress_and_revokes_reward(client: TestClient, memory_app: BotApp):
    owner = actors.owner()
    await client.add(owner, "42", 12)

    result = await client.reset(owner, "42")

    assert result.message.startswith("♻️ Reset complete. user-42 is now 0/10")
    assert (await memory_app.engine.view("community", "42")).count == 0
    assert not memory_app.reward_sync.holds_reward("community", "42")
    assert memory_app.notifications.transcripts[-1][1].action == "♻️ Reset (was 12)"


@pytest.mark.asyncio()
async def test_invalid_amount_is_rejected(client: TestClient, memory_app: BotApp):
    result = await client.add(actors.owner(), "42", 0)

    assert result.message == messages.INVALID_AMOUNT
    assert memory_app.notifications.transcripts == []


@pytest.mark.asyncio()
async def test_missing_target_is_not_found(client: TestClient):
    result = await client.send(Subcommand.ADD, actors.owner())

    assert result.message == messages.MEMBER_NOT_FOUND


@pytest.mark.asyncio()
async def test_admin_can_manage(client: TestClient):
    admin = ActorCapabilities(user_id="9", is_admin=True)

    result = await client.add(admin, "42", 1)

    assert result.message.startswith("✅")


@pytest.mark.asyncio()
async def test_view_defaults_to_actor_and_attaches_image(client: TestClient, memory_app: BotApp):
    member = actors.member("7")
    await client.add(actors.owner(), "7", 4)

    result = await client.view(member)

    assert result.message == f"👑 user-7 - {memory_app.catalog.lookup('og').name} - 4/10"
    assert result.image is not None and result.image.startswith(b"\x89PNG")


@pytest.mark.asyncio()
async def test_setcard_switches_rendered_card(client: TestClient, memory_app: BotApp):
    member = actors.member("7")

    saved = await client.send(Subcommand.SETCARD, member, card_id="pink")
    rejected = await client.send(Subcommand.SETCARD, member, card_id="gold")
    view = await client.view(member)

    assert saved.message == messages.format_card_saved(memory_app.catalog.lookup("pink").name)
    assert saved.ephemeral
    assert rejected.message == messages.UNKNOWN_CARD_CHOICE
    assert memory_app.catalog.lookup("pink").name in view.message


@pytest.mark.asyncio()
async def test_stale_selection_messages(client: TestClient, memory_app: BotApp):
    await memory_app.progress_store.set_selection("community", "7", "retired")

    own = await client.view(actors.member("7"))
    managed = await client.add(actors.owner(), "7", 1)

    assert own.message == messages.OWN_CARD_INVALID
    assert managed.message == messages.TARGET_CARD_INVALID


@pytest.mark.asyncio()
async def test_render_failure_fails_view_but_not_adjustment(tmp_path: Path):
    app = app_fixture(tmp_path)
    client = TestClient(app.commands)
    (tmp_path / "og.png").unlink()

    adjusted = await client.add(actors.owner(), "42", 10)
    viewed = await client.view(actors.member("42"))

    assert adjusted.message.startswith("✅")
    assert app.notifications.transcripts[-1][1].image is None
    assert app.notifications.completions[-1][1].image is None
    assert viewed.message == messages.GENERIC_FAILURE


@pytest.mark.asyncio()
async def test_leaderboard(client: TestClient, memory_app: BotApp):
    empty = await client.send(Subcommand.LEADERBOARD, actors.member())
    assert empty.message == messages.LEADERBOARD_EMPTY

    owner = actors.owner()
    await client.add(owner, "a", 2)
    await client.add(owner, "b", 5)

    board = await client.send(Subcommand.LEADERBOARD, actors.member())

    lines = board.message.splitlines()
    assert lines[0] == "🏆 STAMP LEADERBOARD 🏆"
    assert lines[2].startswith("1. 👑 b - 5/10")
    assert lines[3].startswith("2. 👑 a - 2/10")


@pytest.mark.asyncio()
async def test_reset_all_requires_owner_or_admin(tmp_path: Path):
    app = app_fixture(tmp_path)
    client = TestClient(app.commands, community_id="a")
    other = TestClient(app.commands, community_id="b")
    owner = actors.owner()
    await client.add(owner, "42", 3)
    await other.add(owner, "42", 4)

    denied = await client.send(Subcommand.RESETALL, actors.manager("stamp-mod"))
    done = await client.send(Subcommand.RESETALL, owner)

    assert denied.message == messages.RESET_ALL_FORBIDDEN
    assert done.message == messages.RESET_ALL_DONE
    assert (await app.engine.view("a", "42")).count == 0
    assert (await app.engine.view("b", "42")).count == 4
    assert app.notifications.transcripts[-1][1].target is None


@pytest.mark.asyncio()
async def test_adjustments_publish_events_and_audit(client: TestClient, memory_app: BotApp):
    events = []

    async def listener(payload):
        events.append(payload)

    memory_app.event_bus.subscribe(STAMPS_ADJUSTED, listener)

    await client.add(actors.owner("1"), "42", 10)

    assert events[0]["crossed_upward"] is True
    assert events[0]["next"] == 10
    (_, action, payload), = memory_app.audit_store.dump()
    assert action == "add"
    assert payload["actor_id"] == "1"
    assert payload["target_id"] == "42"


class BrokenProgressStore(InMemoryProgressStore):
    async def update_count(self, community_id, user_id, card_id, transform, timestamp):
        raise StorageError("database is locked")


class RecordingRewardSync:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bool]] = []

    async def sync(self, community_id: str, user_id: str, eligible: bool) -> None:
        self.calls.append((community_id, user_id, eligible))


@pytest.mark.asyncio()
async def test_failing_event_listener_does_not_fail_the_reply(client: TestClient, memory_app: BotApp):
    async def broken(payload):
        raise RuntimeError("listener exploded")

    memory_app.event_bus.subscribe(STAMPS_ADJUSTED, broken)

    result = await client.add(actors.owner(), "42", 3)

    assert result.message.startswith("✅ user-42 now has 3/10")
    assert (await memory_app.engine.view("community", "42")).count == 3
    assert len(memory_app.notifications.transcripts) == 1


@pytest.mark.asyncio()
async def test_storage_error_returns_generic_failure_without_side_effects(tmp_path: Path):
    rewards = RecordingRewardSync()
    app = app_fixture(tmp_path, progress_store=BrokenProgressStore(), reward_sync=rewards)
    client = TestClient(app.commands)

    result = await client.add(actors.owner(), "42", 10)

    assert result.message == messages.GENERIC_FAILURE
    assert result.ephemeral
    assert rewards.calls == []
    assert app.notifications.transcripts == []
    assert app.notifications.completions == []
    assert app.audit_store.dump() == []
    assert (await app.engine.view("community", "42")).count == 0
