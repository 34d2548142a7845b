"""Exceptions raised by Matchy Pairing."""

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

from typing import Optional


class PairingException(Exception):
    """Base class for every error surfaced to a Matchy Pairing caller."""


class InsufficientParticipantsError(PairingException):
    """Fewer than two participants were supplied."""


class TooManyParticipantsError(PairingException):
    """More participants than the engine has been validated for."""


class SolverInvariantError(PairingException):
    """The matching solver produced something that should be impossible.

    This is a bug report trigger, not a retry case: the computation is
    deterministic, so running it again with the same input gives the same
    result.
    """


class InvalidKeyError(PairingException):
    """A pairing key could not be split into seed and checksum."""


class KeyMismatchError(PairingException):
    """A pairing key no longer matches the pairing it was generated for."""


class ConfigurationError(PairingException):
    """Settings are missing or malformed."""


class DiscordAPIError(PairingException):
    """A request to the Discord REST API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


#  LocalWords:  PairingException
