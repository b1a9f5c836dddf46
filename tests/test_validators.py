from pathlib import Path

from stampforge import BotApp
from stampforge.testing import app_fixture
from stampforge.validators import validate_app


def test_validate_app_success(memory_app: BotApp):
    assert validate_app(memory_app) == []


def test_validate_app_detects_missing_assets(tmp_path: Path):
    app = app_fixture(tmp_path)
    (tmp_path / "pink.png").unlink()
    (tmp_path / "stamp.png").unlink()

    issues = validate_app(app)

    assert any("Card 'pink' template" in issue for issue in issues)
    assert any("Stamp glyph" in issue for issue in issues)


def test_validate_app_detects_goal_mismatch(tmp_path: Path):
    app = app_fixture(tmp_path)
    app.config.stamps.goal = 8

    issues = validate_app(app)

    assert any("has 10 slots but the goal is 8" in issue for issue in issues)


def test_validate_app_detects_shared_log_chat(memory_app: BotApp):
    memory_app.config.admin.log_chat_id = -100
    memory_app.config.admin.completed_chat_id = -100

    assert "Log chat and completion chat must differ." in validate_app(memory_app)
