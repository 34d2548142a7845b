"""Pairing data class."""

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

from dataclasses import dataclass, field
from typing import Generic, List

from matchypairing.type_hints import Entity, Match


@dataclass(slots=True)
class Pairing(Generic[Entity]):
    """Result of one round: every participant in exactly one match.

    ``imperfect`` holds the participants whose match contains somebody they
    were matched with before. It has no duplicates and keeps discovery order.
    """

    matches: List[Match] = field(default_factory=list)
    imperfect: List[Entity] = field(default_factory=list)

    @property
    def num_members(self) -> int:
        return sum(len(m) for m in self.matches)

    @property
    def members(self) -> List[Entity]:
        return [e for m in self.matches for e in m]

    def partners_of(self, entity: Entity) -> List[Entity]:
        """Everyone sharing a match with ``entity``.

        Raises
        ------
        KeyError
            when ``entity`` is not part of this pairing
        """
        for match in self.matches:
            if entity in match:
                return [e for e in match if e != entity]
        raise KeyError(entity)


#  LocalWords:  Pairing
