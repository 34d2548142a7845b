"""Matchy Pairing: pair people up without repeating recent matches."""

from matchypairing.exceptions import (
    InsufficientParticipantsError,
    PairingException,
    SolverInvariantError,
    TooManyParticipantsError,
)
from matchypairing.pairing import Pairing, checksum_pairing, graph_pair, random_pair

__version__ = "0.1.0"

__all__ = [
    "InsufficientParticipantsError",
    "Pairing",
    "PairingException",
    "SolverInvariantError",
    "TooManyParticipantsError",
    "checksum_pairing",
    "graph_pair",
    "random_pair",
]
