"""
Text rendering for pairings.
Produces the chat messages shown for a preview, an announcement and the
direct message every participant receives.
"""

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


from typing import Any, Callable, Sequence

from matchypairing.constants import ALL_NOVEL_MESSAGE, DM_TEMPLATE, IMPERFECT_MESSAGE
from matchypairing.pairing.pairing_result import Pairing
from matchypairing.type_hints import Match

Formatter = Callable[[Any], str]


def format_id(user_id: Any) -> str:
    """Format an id as a Discord mention."""
    return f"<@{user_id}>"


def format_role(role_id: Any) -> str:
    return f"<@&{role_id}>"


def format_match(match: Match, fmt: Formatter = format_id) -> str:
    """Join a match into prose.

    Parameters
    ----------
    match : Match
        2 or 3 members
    fmt : Formatter
        how each member is rendered

    Returns
    -------
    str
        ``"A and B"`` or ``"A, B, and C"``

    Raises
    ------
    ValueError
        for an empty match
    """
    if not match:
        raise ValueError("matches should be non-empty")
    names = [fmt(member) for member in match]
    if len(names) == 1:
        return names[0]
    joiner = ", and " if len(names) > 2 else " and "
    return ", ".join(names[:-1]) + joiner + names[-1]


def format_pairs(matches: Sequence[Match], fmt: Formatter = format_id) -> str:
    """One match per line."""
    return "\n".join(format_match(m, fmt) for m in matches)


def format_imperfect(pairing: Pairing, fmt: Formatter = format_id) -> str:
    if not pairing.imperfect:
        return ALL_NOVEL_MESSAGE
    return IMPERFECT_MESSAGE.format(
        members=", ".join(fmt(member) for member in pairing.imperfect)
    )


def format_preview(pairing: Pairing, key: str, fmt: Formatter = format_id) -> str:
    """Preview text returned by create_pairing."""
    return "\n".join(
        [
            format_pairs(pairing.matches, fmt),
            f"Total paired members: {pairing.num_members}",
            format_imperfect(pairing, fmt),
            f"To send this pairing, use this key: `{key}`",
        ]
    )


def format_announcement(role_id: Any, pairs_text: str) -> str:
    return (
        f"Hey {format_role(role_id)}, here are the pairings for the next round of "
        f"matchy meetups!\n\n{pairs_text}"
    )


def format_dm(partners_text: str) -> str:
    return DM_TEMPLATE.format(partners=partners_text)
