import re
from datetime import datetime, timedelta, timezone

import pytest

from conftest import GUILD_ID, HISTORY_CHANNEL_ID, NOTIFICATION_CHANNEL_ID, ROLE_ID
from matchypairing.discord.commands import create_pairing, match_members, send_pairing
from matchypairing.exceptions import (
    InsufficientParticipantsError,
    InvalidKeyError,
    KeyMismatchError,
    PairingException,
)
from matchypairing.pairing import hash_seed

KEY_RE = re.compile(r"use this key: `([^`]+)`")


def key_from(preview):
    return KEY_RE.search(preview).group(1)


@pytest.fixture
def five_members(fake_discord):
    for uid in range(1, 6):
        fake_discord.add_member(uid, name=f"Member {uid}")
    fake_discord.add_member(99, roles=("899",))
    return fake_discord


def test_match_members_uses_role_and_history(fake_discord, discord_client, settings):
    for uid in range(1, 5):
        fake_discord.add_member(uid)
    fake_discord.add_history("<@1> and <@2>\n<@3> and <@4>")
    for seed in range(5):
        pairing = match_members(discord_client, GUILD_ID, seed, settings)
        groups = [set(m) for m in pairing.matches]
        assert {1, 2} not in groups and {3, 4} not in groups
        assert pairing.imperfect == []


def test_old_history_is_forgotten(fake_discord, discord_client, settings):
    fake_discord.add_member(1)
    fake_discord.add_member(2)
    fake_discord.add_history(
        "<@1> and <@2>", timestamp=datetime.now(timezone.utc) - timedelta(days=800)
    )
    assert match_members(discord_client, GUILD_ID, 1, settings).imperfect == []


def test_recent_repeat_is_reported(fake_discord, discord_client, settings):
    fake_discord.add_member(1)
    fake_discord.add_member(2)
    fake_discord.add_history("<@1> and <@2>")
    assert sorted(match_members(discord_client, GUILD_ID, 1, settings).imperfect) == [1, 2]


def test_one_member_is_not_enough(fake_discord, discord_client, settings):
    fake_discord.add_member(1)
    with pytest.raises(InsufficientParticipantsError, match=r"found 1 member with role <@&900>"):
        match_members(discord_client, GUILD_ID, 1, settings)


def test_missing_role(fake_discord, discord_client, settings):
    fake_discord.roles = []
    with pytest.raises(PairingException, match="Could not find a role"):
        match_members(discord_client, GUILD_ID, 1, settings)


def test_missing_history_channel(fake_discord, discord_client, settings):
    fake_discord.channels = [c for c in fake_discord.channels if c["id"] != HISTORY_CHANNEL_ID]
    with pytest.raises(PairingException, match="history channel"):
        match_members(discord_client, GUILD_ID, 1, settings)


def test_create_pairing_preview(five_members, discord_client, settings):
    preview = create_pairing(discord_client, GUILD_ID, "2025-10-17", settings)
    assert "Total paired members: 5" in preview
    assert "All members were matched with new people" in preview
    assert "<@99>" not in preview
    assert key_from(preview).startswith("2025-10-17_")
    # previewing sends nothing
    assert five_members.messages[NOTIFICATION_CHANNEL_ID] == []
    assert five_members.dms == {}


def test_preview_is_repeatable(five_members, discord_client, settings):
    first = create_pairing(discord_client, GUILD_ID, "same seed", settings)
    second = create_pairing(discord_client, GUILD_ID, "same seed", settings)
    assert first == second


def test_send_pairing(five_members, discord_client, settings):
    key = key_from(create_pairing(discord_client, GUILD_ID, "round-7", settings))
    result = send_pairing(discord_client, GUILD_ID, key, settings)
    assert result == "Successfully messaged 5 users."

    announcement = five_members.messages[NOTIFICATION_CHANNEL_ID][0]
    assert announcement["content"].startswith(f"Hey <@&{ROLE_ID}>")

    channel_id, message_id, content = five_members.edits[0]
    assert channel_id == HISTORY_CHANNEL_ID
    link, pairs = content.split("\n", 1)
    assert link == (
        f"https://discord.com/channels/{GUILD_ID}/{NOTIFICATION_CHANNEL_ID}/{announcement['id']}"
    )
    assert pairs in announcement["content"]

    assert sorted(five_members.dms) == ["1", "2", "3", "4", "5"]
    assert all("**Your pairing is with:** <@" in dm for dm in five_members.dms.values())
    assert any("(Member " in dm for dm in five_members.dms.values())


def test_sent_pairing_becomes_history(five_members, discord_client, settings):
    key = key_from(create_pairing(discord_client, GUILD_ID, "week-1", settings))
    first = match_members(discord_client, GUILD_ID, hash_seed("week-1"), settings)
    send_pairing(discord_client, GUILD_ID, key, settings)

    second = match_members(discord_client, GUILD_ID, hash_seed("week-2"), settings)
    old_pairs = {
        frozenset((a, b)) for m in first.matches for a in m for b in m if a != b
    }
    new_pairs = {
        frozenset((a, b)) for m in second.matches for a in m for b in m if a != b
    }
    assert len(new_pairs & old_pairs) < len(old_pairs)


def test_send_pairing_key_mismatch(five_members, discord_client, settings):
    key = key_from(create_pairing(discord_client, GUILD_ID, "round-8", settings))
    five_members.add_member(6)
    with pytest.raises(KeyMismatchError):
        send_pairing(discord_client, GUILD_ID, key, settings)
    assert five_members.messages[NOTIFICATION_CHANNEL_ID] == []
    assert five_members.dms == {}


def test_send_pairing_bad_key(five_members, discord_client, settings):
    with pytest.raises(InvalidKeyError):
        send_pairing(discord_client, GUILD_ID, "no-separator", settings)


def test_closed_dms_are_skipped(five_members, discord_client, settings):
    five_members.closed_dms.add("3")
    key = key_from(create_pairing(discord_client, GUILD_ID, "round-9", settings))
    assert send_pairing(discord_client, GUILD_ID, key, settings) == "Successfully messaged 4 users."
    assert "3" not in five_members.dms


def test_failed_name_lookup_still_messages_everyone(five_members, discord_client, settings):
    key = key_from(create_pairing(discord_client, GUILD_ID, "round-9", settings))
    del five_members.users["3"]
    assert send_pairing(discord_client, GUILD_ID, key, settings) == "Successfully messaged 5 users."
    partners_of_3 = [dm for uid, dm in five_members.dms.items() if uid != "3" and "<@3>" in dm]
    assert partners_of_3
    assert all("<@3> (" not in dm for dm in partners_of_3)
    assert "(Member" in five_members.dms["3"]
