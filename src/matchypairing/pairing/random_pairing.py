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

from typing import Iterable

from matchypairing.pairing.matching import check_participant_count
from matchypairing.pairing.pairing_result import Pairing
from matchypairing.pairing.shuffle import shuffled
from matchypairing.type_hints import Entity
from matchypairing.utils import setup_logger

logger = setup_logger(__name__)


def random_pair(entities: Iterable[Entity], seed: int) -> Pairing:
    """Pair neighbours in the shuffled order, ignoring history.

    With an odd count the last participant joins the last pair. The imperfect
    list is always empty since no history is consulted.

    Parameters
    ----------
    entities : Iterable[Entity]
        unique, hashable participants
    seed : int
        seed for the shuffle

    Returns
    -------
    Pairing
        neighbours in shuffled order, nobody marked imperfect

    Raises
    ------
    InsufficientParticipantsError
        with fewer than two participants
    """
    order = shuffled(entities, seed)
    check_participant_count(len(order), max_participants=None)

    matches = [order[i : i + 2] for i in range(0, len(order) - 1, 2)]
    if len(order) % 2:
        matches[-1].append(order[-1])

    logger.info("Randomly paired %d participants", len(order))
    return Pairing(matches=matches)
