"""Seeded shuffling."""

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

import random
from typing import Iterable, List

from matchypairing.type_hints import Entity


def shuffled(items: Iterable[Entity], seed: int) -> List[Entity]:
    """Return a new list holding ``items`` in a seed-determined order.

    The generator is private to the call and seeded from ``seed`` alone, so the
    same items and seed give the same order in any process. The caller's
    iterable is left untouched.

    The generator is ``random.Random`` (Mersenne Twister), not a stream cipher
    such as ChaCha. Orders, and so pairing keys, only match other installs of
    this package.

    Parameters
    ----------
    items : Iterable[Entity]
        the things to shuffle
    seed : int
        a 64 bit seed, see :func:`matchypairing.pairing.keys.hash_seed`

    Returns
    -------
    List[Entity]
        a permutation of ``items``
    """
    rng = random.Random(seed)
    result = list(items)
    rng.shuffle(result)
    return result
