"""Matchy Pairing entry point."""

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

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from matchypairing.config import Settings
from matchypairing.discord import DiscordClient, create_pairing, send_pairing
from matchypairing.exceptions import PairingException
from matchypairing.pairing import (
    checksum_pairing,
    graph_pair,
    hash_seed,
    make_key,
    random_pair,
)
from matchypairing.type_hints import Match
from matchypairing.utils import setup_logger
from matchypairing.utils.formatting import format_preview

logger = setup_logger(__name__)

HISTORY_SPLIT_RE = re.compile(r"[,\s]+")


def read_participants(path: Path) -> List[str]:
    """One name per line, blank lines and ``#`` comments skipped."""
    names = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


def read_history(path: Path) -> List[Match]:
    """One previous match per line, names split by commas or whitespace."""
    matches = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if line.lstrip().startswith("#"):
            continue
        names = [n for n in HISTORY_SPLIT_RE.split(line.strip()) if n]
        if len(names) > 1:
            matches.append(names)
    return matches


def run_local(args: argparse.Namespace, settings: Settings) -> str:
    """Pair people listed in local files."""
    participants = read_participants(args.participants)
    history = read_history(args.history) if args.history else []
    seed = hash_seed(args.seed)
    if args.naive:
        pairing = random_pair(participants, seed)
    else:
        pairing = graph_pair(
            participants, history, seed, max_participants=settings.max_participants
        )
    key = make_key(args.seed, checksum_pairing(seed, pairing.matches))
    return format_preview(pairing, key, fmt=str)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matchy-pairing",
        description="Pair up members so nobody meets a recent partner again.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", help="Preview a pairing for a Discord guild")
    preview.add_argument("seed", help="Seed for the pairing, for example today's date")
    preview.add_argument("--guild", type=int, required=True, help="Guild (server) id")

    send = sub.add_parser("send", help="Send a previewed pairing")
    send.add_argument("key", help="A pairing key returned by preview")
    send.add_argument("--guild", type=int, required=True, help="Guild (server) id")

    local = sub.add_parser("pair", help="Pair names read from local files")
    local.add_argument(
        "--participants", type=Path, required=True, help="File with one name per line"
    )
    local.add_argument(
        "--history", type=Path, help="File with one previous match per line"
    )
    local.add_argument("--seed", required=True, help="Seed for the pairing")
    local.add_argument(
        "--naive", action="store_true", help="Ignore history and pair at random"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
        if args.command == "pair":
            output = run_local(args, settings)
        else:
            with DiscordClient(settings.require_token()) as client:
                if args.command == "preview":
                    output = create_pairing(client, args.guild, args.seed, settings)
                else:
                    output = send_pairing(client, args.guild, args.key, settings)
    except PairingException as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        return 1
    except OSError as e:
        logger.error("could not read input: %s", e)
        print(f"Error: {e}")
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

#  LocalWords:  argparse
