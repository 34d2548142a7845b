"""Seeds, checksums and the pairing key.

A pairing is previewed first and sent later. The preview hands out a key made
of the seed string and a checksum of the pairing. Sending recomputes the
pairing from the same seed and live data and only proceeds when the checksum
still matches, i.e. nobody joined or left in between.
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

import hashlib
from typing import Sequence, Tuple

from matchypairing.constants import CHECKSUM_LENGTH, KEY_SEPARATOR
from matchypairing.exceptions import InvalidKeyError
from matchypairing.type_hints import Match


def hash_seed(seed: str) -> int:
    """Hash a string into an unsigned 64 bit seed.

    Unlike ``hash()`` the result does not depend on PYTHONHASHSEED, so the
    same string maps to the same seed in every process.
    """
    digest = hashlib.blake2b(seed.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def checksum_pairing(seed: int, matches: Sequence[Match]) -> str:
    """Short fingerprint over a seed and the exact match structure.

    Parameters
    ----------
    seed : int
        the seed the pairing was generated with
    matches : Sequence[Match]
        the matches, order of matches and of members inside them counts

    Returns
    -------
    str
        8 lowercase hex digits
    """
    hasher = hashlib.blake2b(digest_size=CHECKSUM_LENGTH // 2)
    hasher.update(str(seed).encode("ascii"))
    for match in matches:
        # separators keep [[a, b], [c]] apart from [[a], [b, c]]
        hasher.update(b"|")
        hasher.update(",".join(repr(member) for member in match).encode("utf-8"))
    return hasher.hexdigest()


def make_key(seed: str, checksum: str) -> str:
    return f"{seed}{KEY_SEPARATOR}{checksum}"


def parse_key(key: str) -> Tuple[str, str]:
    """Split a key into seed string and checksum.

    The seed string may itself contain the separator, only the last one counts.

    Raises
    ------
    InvalidKeyError
        when there is no separator or either side is empty
    """
    seed, sep, checksum = key.strip().rpartition(KEY_SEPARATOR)
    if not sep or not seed or not checksum:
        raise InvalidKeyError(
            "Invalid key. Please make sure you only use keys returned by create_pairing."
        )
    return seed, checksum
