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
History aware pairing.

Pairs a group of people so that as few as possible meet somebody they were
matched with before:

1. shuffle the participants with the seed, node ``i`` is the i-th shuffled one
2. build the candidate graph (everyone minus previous partners)
3. take a maximum cardinality matching, every matched pair is new
4. pair whoever is left over in shuffled order, these pairs are repeats
5. with an odd count, put the last person into the match where they add the
   fewest repeat meetings
6. if that still leaves someone with a previous partner, try every other
   person as the odd one out and keep the arrangement with the fewest
   imperfect participants

Examples
--------
    >>> pairing = graph_pair(["ann", "bob", "cat", "dan"], [["ann", "bob"]], seed=7)
    >>> ["ann", "bob"] in pairing.matches
    False
"""

from collections import Counter
from itertools import chain
from typing import Collection, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import networkx as nx

from matchypairing.constants import MAX_PARTICIPANTS, MIN_PARTICIPANTS
from matchypairing.exceptions import (
    InsufficientParticipantsError,
    SolverInvariantError,
    TooManyParticipantsError,
)
from matchypairing.pairing.graph import (
    ConstraintEdge,
    ConstraintSet,
    build_matching_graph,
    constraint_count,
)
from matchypairing.pairing.pairing_result import Pairing
from matchypairing.pairing.shuffle import shuffled
from matchypairing.type_hints import Entity, Match, NodeEdge, NodeId
from matchypairing.utils import setup_logger

logger = setup_logger(__name__)


class Arrangement(NamedTuple):
    """Groups of node ids and the nodes stuck with a previous partner."""

    groups: List[List[NodeId]]
    imperfect: List[NodeId]
    # match score of the remainder, 0 without one
    score: int


def check_participant_count(
    count: int, max_participants: Optional[int] = MAX_PARTICIPANTS
) -> None:
    """Validate the group size before any work is done.

    Raises
    ------
    InsufficientParticipantsError
        fewer than two participants
    TooManyParticipantsError
        more than ``max_participants`` (no upper bound when None)
    """
    if count < MIN_PARTICIPANTS:
        logger.error("Cannot pair %d participants", count)
        raise InsufficientParticipantsError(
            f"Cannot pair with fewer than {MIN_PARTICIPANTS} participants (got {count})."
        )
    if max_participants is not None and count > max_participants:
        logger.error("Participant count %d over limit %d", count, max_participants)
        raise TooManyParticipantsError(
            f"Exceeded the {max_participants}-participant limit of graph_pair() "
            f"(got {count}). This can be increased once performance is verified."
        )


def maximum_matching(graph: nx.Graph, constraints: ConstraintSet) -> List[NodeEdge]:
    """Maximum cardinality matching of ``graph`` as sorted id pairs.

    Edge ``weight`` attributes only pick among the maximum cardinality
    matchings; an unweighted graph counts every edge as 1.

    Raises
    ------
    SolverInvariantError
        if the solver returns a constrained edge or uses a node twice
    """
    raw = nx.max_weight_matching(graph, maxcardinality=True)
    matched = sorted((min(edge), max(edge)) for edge in raw)

    seen = set()
    for a, b in matched:
        if ConstraintEdge.of(a, b) in constraints:
            logger.error("Solver matched constrained edge (%d, %d)", a, b)
            raise SolverInvariantError(f"Matching contains constrained edge ({a}, {b})")
        if a in seen or b in seen:
            logger.error("Solver matched a node twice in %s", matched)
            raise SolverInvariantError("Matching uses a node more than once")
        seen.update((a, b))

    logger.debug("maximum matching has %d pairs", len(matched))
    return matched


def pair_unmatched(
    node_count: int,
    matched: Iterable[Sequence[NodeId]],
    exclude: Optional[NodeId] = None,
) -> Tuple[List[List[NodeId]], Optional[NodeId]]:
    """Pair the nodes the matching left out, in node order.

    ``exclude`` is left out of the pairs altogether.

    Returns
    -------
    Tuple[List[List[NodeId]], Optional[NodeId]]
        the pairs and the remainder, if the number of unmatched nodes is odd
    """
    covered = set(chain.from_iterable(matched))
    unmatched = [n for n in range(node_count) if n not in covered and n != exclude]
    pairs = [unmatched[i : i + 2] for i in range(0, len(unmatched) - 1, 2)]
    remainder = unmatched[-1] if len(unmatched) % 2 else None
    return pairs, remainder


def _added_imperfect(
    remainder: NodeId,
    group: Sequence[NodeId],
    constraints: ConstraintSet,
    imperfect: Collection[NodeId],
) -> int:
    """How many people become imperfect if ``remainder`` joins ``group``."""
    met = [n for n in group if ConstraintEdge.of(n, remainder) in constraints]
    if not met:
        return 0
    return 1 + sum(1 for n in met if n not in imperfect)


def place_remainder(
    groups: List[List[NodeId]],
    remainder: NodeId,
    constraints: ConstraintSet,
    imperfect: Collection[NodeId] = (),
) -> Tuple[int, int]:
    """Append ``remainder`` to the group where it adds the fewest repeats.

    Groups are ranked by how many people would newly be imperfect (members of
    ``imperfect`` already are), then by the match score. Ties go to the
    earliest group.

    Returns
    -------
    Tuple[int, int]
        the index of the chosen group and the remainder match score (number
        of its members ``remainder`` already met, lower is better)

    Raises
    ------
    SolverInvariantError
        when there is no group to join
    """
    if not groups:
        logger.error("No match available for remainder node %d", remainder)
        raise SolverInvariantError("Unexpectedly encountered no match for remainder")

    imperfect = set(imperfect)
    best_index, best_key = None, None
    for index, group in enumerate(groups):
        key = (
            _added_imperfect(remainder, group, constraints, imperfect),
            constraint_count(remainder, group, constraints),
        )
        if best_key is None or key < best_key:
            best_index, best_key = index, key
        if best_key == (0, 0):
            break

    groups[best_index].append(remainder)
    return best_index, best_key[1]


def arrange(
    node_count: int,
    matched: Sequence[NodeEdge],
    constraints: ConstraintSet,
    exposed: Optional[NodeId] = None,
) -> Arrangement:
    """Turn a matching into groups covering all ``node_count`` nodes.

    Unmatched nodes are paired as repeats. The remainder, ``exposed`` when
    given, joins a group through :func:`place_remainder`.
    """
    repeat_pairs, remainder = pair_unmatched(node_count, matched, exclude=exposed)
    if exposed is not None:
        remainder = exposed
    imperfect: List[NodeId] = list(chain.from_iterable(repeat_pairs))
    groups: List[List[NodeId]] = [list(m) for m in matched] + [
        list(p) for p in repeat_pairs
    ]

    score = 0
    if remainder is not None:
        index, score = place_remainder(groups, remainder, constraints, imperfect)
        logger.debug("remainder %d joined match %d with score %d", remainder, index, score)
        if score > 0:
            # the remainder and everyone it already met now share a repeat match
            newly_imperfect = [remainder] + [
                n
                for n in groups[index]
                if n != remainder and ConstraintEdge.of(n, remainder) in constraints
            ]
            imperfect.extend(n for n in newly_imperfect if n not in imperfect)
    return Arrangement(groups, imperfect, score)


def _graph_without(
    graph: nx.Graph, constraints: ConstraintSet, node: NodeId
) -> nx.Graph:
    """Candidate graph minus ``node``, weighted by how well ``node`` could join each edge.

    A matching holding one edge where ``node`` met nobody outweighs any
    matching without such an edge. After that, edges where ``node`` met one
    of the two are preferred.
    """
    sub = graph.copy()
    sub.remove_node(node)
    clean_bonus = graph.number_of_nodes()
    for a, b, data in sub.edges(data=True):
        met = constraint_count(node, [a, b], constraints)
        data["weight"] = 1 + (clean_bonus if met == 0 else 1 if met == 1 else 0)
    return sub


def reposition_remainder(
    graph: nx.Graph,
    constraints: ConstraintSet,
    best: Arrangement,
    floor: int,
) -> Arrangement:
    """Try every node as the one joining a match, keep the fewest imperfect.

    Nodes are tried in order and a candidate only replaces ``best`` when it
    is strictly better. The search stops once ``floor``, the fewest imperfect
    people any arrangement can have, is reached.
    """
    node_count = graph.number_of_nodes()
    for node in range(node_count):
        if len(best.imperfect) <= floor:
            break
        matched = maximum_matching(_graph_without(graph, constraints, node), constraints)
        candidate = arrange(node_count, matched, constraints, exposed=node)
        if len(candidate.imperfect) < len(best.imperfect):
            logger.debug(
                "node %d as remainder leaves %d imperfect instead of %d",
                node,
                len(candidate.imperfect),
                len(best.imperfect),
            )
            best = candidate
    return best


def graph_pair(
    entities: Iterable[Entity],
    previous_matches: Iterable[Match],
    seed: int,
    *,
    max_participants: Optional[int] = MAX_PARTICIPANTS,
    strict: bool = False,
) -> Pairing:
    """Create pairs (and at most one triple) avoiding previous partners.

    Parameters
    ----------
    entities : Iterable[Entity]
        unique, hashable participants
    previous_matches : Iterable[Match]
        earlier matches; people in them who are not participants are ignored
    seed : int
        seed for the shuffle, the same seed gives the same pairing
    max_participants : Optional[int]
        upper bound on the group size, None disables the check
    strict : bool
        when True an empty matching (everybody already met everybody) is
        reported as a ``SolverInvariantError`` instead of falling back to
        pairs of people who met before

    Returns
    -------
    Pairing
        the matches and the participants stuck with a previous partner

    Raises
    ------
    InsufficientParticipantsError
        fewer than two participants
    TooManyParticipantsError
        more than ``max_participants`` participants
    SolverInvariantError
        inconsistent solver output, or an empty matching in strict mode
    """
    entities = list(entities)
    check_participant_count(len(entities), max_participants)
    order = shuffled(entities, seed)

    graph, constraints = build_matching_graph(order, previous_matches)
    matched = maximum_matching(graph, constraints)

    if not matched:
        if strict:
            logger.error("Matching was unexpectedly empty for %d nodes", len(order))
            raise SolverInvariantError("Matching was unexpectedly empty")
        logger.warning(
            "Every pair among %d participants already met, pairing repeats",
            len(order),
        )

    best = arrange(len(order), matched, constraints)
    if best.score > 0:
        # one clean triple plus a maximum matching is the best possible outcome
        floor = len(order) - 2 * len(matched) - 1
        best = reposition_remainder(graph, constraints, best, floor)

    pairing = Pairing(
        matches=[[order[n] for n in group] for group in best.groups],
        imperfect=[order[n] for n in best.imperfect],
    )
    _check_partition(entities, pairing)

    logger.info(
        "Paired %d participants into %d matches, %d imperfect",
        len(entities),
        len(pairing.matches),
        len(pairing.imperfect),
    )
    return pairing


def _check_partition(entities: List[Entity], pairing: Pairing) -> None:
    """Every participant exactly once, every match of size 2 or 3."""
    if Counter(pairing.members) != Counter(entities):
        logger.error("Pairing %s is not a partition of %s", pairing.matches, entities)
        raise SolverInvariantError("Pairing does not contain every participant once")
    sizes = [len(m) for m in pairing.matches]
    if any(size not in (2, 3) for size in sizes) or sizes.count(3) > 1:
        logger.error("Pairing has bad match sizes %s", sizes)
        raise SolverInvariantError(f"Pairing has invalid match sizes {sizes}")


#  LocalWords:  graph_pair
