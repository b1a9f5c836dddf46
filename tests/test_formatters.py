from datetime import datetime, timezone

from stampforge.commands import messages
from stampforge.domain.leaderboard import LeaderboardEntry
from stampforge.domain.notifications import CompletionNotice, TranscriptEntry

WHEN = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_format_progress_allows_overflow():
    assert messages.format_progress("Ann", "TBP OG", 11, 10) == "👑 Ann - TBP OG - 11/10"


def test_format_leaderboard_lists_ranks():
    entries = [
        LeaderboardEntry(rank=1, user_id="1", display_name="Ann", card_id="og", card_name="TBP OG", count=9),
        LeaderboardEntry(rank=2, user_id="2", display_name="Bo", card_id="x", card_name="Unknown Card", count=3),
    ]

    text = messages.format_leaderboard(entries, 10)

    assert text.splitlines() == [
        "🏆 STAMP LEADERBOARD 🏆",
        "",
        "1. 👑 Ann - 9/10 (TBP OG)",
        "2. 👑 Bo - 3/10 (Unknown Card)",
    ]


def test_describe_adjustment():
    assert messages.describe_adjustment(True, 3, 8, 11) == "➕ Added 3 (8 → 11)"
    assert messages.describe_adjustment(False, 5, 2, 0) == "➖ Removed 5 (2 → 0)"


def test_format_transcript_for_member_and_community():
    member = TranscriptEntry(
        actor="Mod",
        action="➕ Added 1 (0 → 1)",
        target="Ann",
        resulting_count=1,
        goal=10,
        card_name="TBP OG",
        created_at=WHEN,
    )
    community = TranscriptEntry(actor="Owner", action="RESET ALL", community_name="Cafe", created_at=WHEN)

    member_text = messages.format_transcript(member)
    community_text = messages.format_transcript(community)

    assert "• Member: Ann" in member_text
    assert "• Total: 1/10" in member_text
    assert "2024-05-01 12:30 UTC" in member_text
    assert community_text.startswith("🧾 Stamp System Reset (ALL)")
    assert "• Community: Cafe" in community_text


def test_format_completion():
    notice = CompletionNotice(actor="Mod", target="Ann", count=10, goal=10, card_name="TBP Pink", created_at=WHEN)

    lines = messages.format_completion(notice).splitlines()

    assert lines[0] == "🎉 STAMP CARD COMPLETED! 🎉"
    assert "👑 Member: Ann" in lines
    assert "✅ Total: 10/10" in lines
