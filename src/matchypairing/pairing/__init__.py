"""Pairing algorithms."""

from matchypairing.pairing.keys import checksum_pairing, hash_seed, make_key, parse_key
from matchypairing.pairing.matching import graph_pair
from matchypairing.pairing.pairing_result import Pairing
from matchypairing.pairing.random_pairing import random_pair
from matchypairing.pairing.shuffle import shuffled

__all__ = [
    "Pairing",
    "checksum_pairing",
    "graph_pair",
    "hash_seed",
    "make_key",
    "parse_key",
    "random_pair",
    "shuffled",
]
