"""Discord participant source, history source and delivery."""

from matchypairing.discord.api import DiscordClient
from matchypairing.discord.commands import create_pairing, match_members, send_pairing

__all__ = ["DiscordClient", "create_pairing", "match_members", "send_pairing"]
