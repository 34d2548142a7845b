"""Runtime settings read from the environment."""

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

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dateutil.relativedelta import relativedelta

from matchypairing.constants import (
    HISTORY_CHANNEL_NAME,
    HISTORY_MAX_AGE_DAYS,
    MAX_HISTORY_MESSAGES,
    MAX_PARTICIPANTS,
    NOTIFICATION_CHANNEL_NAME,
    ROLE_NAME,
)
from matchypairing.exceptions import ConfigurationError


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Everything the Discord commands need besides the guild id.

    Attributes
    ----------
    discord_token : Optional[str]
        bot token, only needed for commands talking to Discord
    role_name : str
        members with this role take part
    history_channel_name : str
        channel holding previous pairings
    notification_channel_name : str
        channel the pairing is announced in
    max_participants : int
        cap on the group size passed to the engine
    max_history_messages : int
        how many history messages to read at most
    history_max_age_days : int
        older history messages are ignored
    """

    discord_token: Optional[str] = None
    role_name: str = ROLE_NAME
    history_channel_name: str = HISTORY_CHANNEL_NAME
    notification_channel_name: str = NOTIFICATION_CHANNEL_NAME
    max_participants: int = MAX_PARTICIPANTS
    max_history_messages: int = MAX_HISTORY_MESSAGES
    history_max_age_days: int = HISTORY_MAX_AGE_DAYS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (``os.environ`` by default).

        Raises
        ------
        ConfigurationError
            when a numeric variable is not a positive integer
        """
        if env is None:
            env = os.environ
        return cls(
            discord_token=env.get("DISCORD_TOKEN") or None,
            role_name=env.get("MATCHY_ROLE_NAME", ROLE_NAME),
            history_channel_name=env.get("MATCHY_HISTORY_CHANNEL", HISTORY_CHANNEL_NAME),
            notification_channel_name=env.get(
                "MATCHY_NOTIFICATION_CHANNEL", NOTIFICATION_CHANNEL_NAME
            ),
            max_participants=_int_setting(env, "MATCHY_MAX_PARTICIPANTS", MAX_PARTICIPANTS),
            max_history_messages=_int_setting(
                env, "MATCHY_MAX_HISTORY_MESSAGES", MAX_HISTORY_MESSAGES
            ),
            history_max_age_days=_int_setting(
                env, "MATCHY_HISTORY_MAX_AGE_DAYS", HISTORY_MAX_AGE_DAYS
            ),
        )

    @property
    def history_max_age(self) -> relativedelta:
        return relativedelta(days=self.history_max_age_days)

    def require_token(self) -> str:
        if not self.discord_token:
            raise ConfigurationError("missing DISCORD_TOKEN")
        return self.discord_token
