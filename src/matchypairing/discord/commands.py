# Matchy Pairing
# Copyright (C) 2025  Matchy Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""
Preview and send a pairing for a Discord guild.

``create_pairing`` shows the pairing an organizer would get for a seed along
with a key. ``send_pairing`` takes that key, recomputes the pairing and, when
nothing changed, announces it, records it in the history channel and direct
messages every participant.
"""

from typing import Any, Dict, Optional

from matchypairing.config import Settings
from matchypairing.discord.api import DiscordClient, message_link
from matchypairing.discord.history import previous_matches
from matchypairing.exceptions import (
    DiscordAPIError,
    InsufficientParticipantsError,
    KeyMismatchError,
    PairingException,
)
from matchypairing.pairing import (
    Pairing,
    checksum_pairing,
    graph_pair,
    hash_seed,
    make_key,
    parse_key,
)
from matchypairing.type_hints import UserId
from matchypairing.utils import setup_logger
from matchypairing.utils.formatting import (
    format_announcement,
    format_dm,
    format_id,
    format_pairs,
    format_preview,
    format_role,
)

logger = setup_logger(__name__)


def _require_role(client: DiscordClient, guild_id: int, settings: Settings) -> Dict[str, Any]:
    role = client.find_role(guild_id, settings.role_name)
    if role is None:
        raise PairingException(f"Could not find a role with name `{settings.role_name}`")
    return role


def _require_channel(client: DiscordClient, guild_id: int, name: str, kind: str) -> Dict[str, Any]:
    channel = client.find_channel(guild_id, name)
    if channel is None:
        raise PairingException(f"Could not find {kind} channel `{name}`")
    return channel


def match_members(
    client: DiscordClient,
    guild_id: int,
    seed: int,
    settings: Settings,
    role: Optional[Dict[str, Any]] = None,
) -> Pairing:
    """Pair the members holding the configured role.

    Parameters
    ----------
    client : DiscordClient
        an authenticated client
    guild_id : int
        the guild (server) to pair
    seed : int
        the hashed seed
    settings : Settings
        role and channel names, limits
    role : Optional[Dict[str, Any]]
        the role object when the caller already looked it up

    Returns
    -------
    Pairing
        pairing of the members' user ids

    Raises
    ------
    PairingException
        role or history channel missing, too few or too many members
    """
    role = role or _require_role(client, guild_id, settings)
    history_channel = _require_channel(
        client, guild_id, settings.history_channel_name, "history"
    )
    participants = client.members_with_role(guild_id, role["id"])
    if len(participants) <= 1:
        count = len(participants)
        raise InsufficientParticipantsError(
            f"Need at least two members to create a pairing (found {count} "
            f"member{'' if count == 1 else 's'} with role {format_role(role['id'])})."
        )

    history = previous_matches(
        client.iter_channel_messages(
            history_channel["id"], max_messages=settings.max_history_messages
        ),
        max_age=settings.history_max_age,
    )
    return graph_pair(
        participants, history, seed, max_participants=settings.max_participants
    )


def create_pairing(
    client: DiscordClient, guild_id: int, seed_str: str, settings: Settings
) -> str:
    """Preview the pairing for ``seed_str``.

    Returns
    -------
    str
        the pairs, member count, imperfect members and the key for
        send_pairing
    """
    seed = hash_seed(seed_str)
    pairing = match_members(client, guild_id, seed, settings)
    key = make_key(seed_str, checksum_pairing(seed, pairing.matches))
    logger.info("created pairing with key %s", key)
    return format_preview(pairing, key)


def _partner_label(client: DiscordClient, user: UserId) -> str:
    """Mention plus display name, or just the mention when the lookup fails."""
    try:
        return f"{format_id(user)} ({client.display_name(user)})"
    except DiscordAPIError as e:
        logger.warning("could not look up the name of %s: %s", user, e)
        return format_id(user)


def _partners_text(client: DiscordClient, pairing: Pairing, user: UserId) -> str:
    return " and ".join(
        _partner_label(client, uid) for uid in pairing.partners_of(user)
    )


def send_pairing(
    client: DiscordClient, guild_id: int, key: str, settings: Settings
) -> str:
    """Send the pairing previewed under ``key``.

    Raises
    ------
    InvalidKeyError
        the key is malformed
    KeyMismatchError
        the pairing changed since the key was created
    PairingException
        a role or channel is missing, or pairing failed
    """
    seed_str, checksum = parse_key(key)
    role = _require_role(client, guild_id, settings)
    notification_channel = _require_channel(
        client, guild_id, settings.notification_channel_name, "notification"
    )
    history_channel = _require_channel(
        client, guild_id, settings.history_channel_name, "history"
    )

    seed = hash_seed(seed_str)
    pairing = match_members(client, guild_id, seed, settings, role=role)
    if checksum_pairing(seed, pairing.matches) != checksum:
        logger.error("key %s does not match the current pairing", key)
        raise KeyMismatchError(
            "Key mismatch. This can happen if you typed the key incorrectly, or the "
            "members with the matchy meetups role have changed since this key was "
            "generated. Please call create_pairing again to get a new key."
        )

    pairs_text = format_pairs(pairing.matches)
    announcement = client.create_message(
        notification_channel["id"], format_announcement(role["id"], pairs_text)
    )
    # post a placeholder and edit the mentions in, edits do not ping anyone
    record = client.create_message(history_channel["id"], ".")
    client.edit_message(
        history_channel["id"],
        record["id"],
        f"{message_link(guild_id, notification_channel['id'], announcement['id'])}\n{pairs_text}",
    )

    messages_sent = 0
    for match in pairing.matches:
        for user in match:
            content = format_dm(_partners_text(client, pairing, user))
            try:
                client.send_dm(user, content)
            except DiscordAPIError as e:
                # users can close their DMs, the rest still get theirs
                logger.warning("could not message %s: %s", user, e)
                continue
            messages_sent += 1

    logger.info("Messaged %d users.", messages_sent)
    return f"Successfully messaged {messages_sent} users."
