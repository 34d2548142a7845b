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
Previous matches recovered from the history channel.

Every sent pairing is recorded in the history channel as one match per line,
for example ``<@1> and <@2>`` or ``<@1>, <@2>, and <@3>``. Reading it back is
a matter of collecting the user mentions of each line.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from matchypairing.type_hints import Match, UserId
from matchypairing.utils import setup_logger

logger = setup_logger(__name__)

# user mentions only, role mentions are <@&id>
MENTION_RE = re.compile(r"<@([0-9]+)>")

DEFAULT_MAX_AGE = relativedelta(years=1)


def parse_history_line(line: str) -> List[UserId]:
    """User ids mentioned in ``line``, in order."""
    return [int(uid) for uid in MENTION_RE.findall(line)]


def parse_history_message(content: str) -> List[Match]:
    """One match per line mentioning more than one user."""
    matches = []
    for line in content.split("\n"):
        ids = parse_history_line(line)
        if len(ids) > 1:
            matches.append(ids)
    return matches


def previous_matches(
    messages: Iterable[Dict[str, Any]],
    now: Optional[datetime] = None,
    max_age: relativedelta = DEFAULT_MAX_AGE,
) -> List[Match]:
    """Collect matches from history messages, newest first.

    Parameters
    ----------
    messages : Iterable[Dict[str, Any]]
        Discord message objects (``content`` and ISO 8601 ``timestamp``),
        newest first
    now : Optional[datetime]
        reference time, timezone aware, defaults to the current UTC time
    max_age : relativedelta
        messages older than ``now - max_age`` end the scan

    Returns
    -------
    List[Match]
        previous matches, possibly naming people who left since
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - max_age
    matches: List[Match] = []
    scanned = 0
    for message in messages:
        if isoparse(message["timestamp"]) < cutoff:
            # messages are newest first, everything after this is older
            break
        scanned += 1
        matches.extend(parse_history_message(message.get("content", "")))
    logger.info("read %d previous matches from %d messages", len(matches), scanned)
    return matches
