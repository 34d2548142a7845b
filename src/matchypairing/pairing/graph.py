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
Constraint graph construction.

Participants become dense integer nodes (their index in the shuffled list).
Every pair of participants that already met in a previous match becomes a
ConstraintEdge, and the candidate graph is the complete graph over all nodes
with those edges removed. Any matching found on the candidate graph therefore
only contains pairs that never met before.
"""

from itertools import combinations
from typing import Dict, Iterable, List, NamedTuple, Sequence, Set, Tuple

import networkx as nx

from matchypairing.type_hints import Entity, Match, NodeId
from matchypairing.utils import setup_logger

logger = setup_logger(__name__)


class ConstraintEdge(NamedTuple):
    """Two node ids that may not be paired, stored lower id first."""

    lower: NodeId
    upper: NodeId

    @classmethod
    def of(cls, a: NodeId, b: NodeId) -> "ConstraintEdge":
        return cls(a, b) if a <= b else cls(b, a)


ConstraintSet = Set[ConstraintEdge]


def node_ids(entities: Sequence[Entity]) -> Dict[Entity, NodeId]:
    """Map each entity to its position in ``entities``."""
    return {entity: i for i, entity in enumerate(entities)}


def build_constraints(
    nodes: Dict[Entity, NodeId], previous_matches: Iterable[Match]
) -> ConstraintSet:
    """Collect a ConstraintEdge for every pair that shared a previous match.

    Members of a previous match who are not in ``nodes`` are dropped, so
    people who left the group impose nothing.
    """
    constraints: ConstraintSet = set()
    for match in previous_matches:
        present = [nodes[member] for member in match if member in nodes]
        for a, b in combinations(present, 2):
            # the same person listed twice in one match
            if a == b:
                continue
            constraints.add(ConstraintEdge.of(a, b))
    return constraints


def build_matching_graph(
    entities: Sequence[Entity], previous_matches: Iterable[Match]
) -> Tuple[nx.Graph, ConstraintSet]:
    """Build the candidate graph for ``entities``.

    Parameters
    ----------
    entities : Sequence[Entity]
        the participants, already shuffled; node ``i`` is ``entities[i]``
    previous_matches : Iterable[Match]
        historical matches, possibly mentioning people not in ``entities``

    Returns
    -------
    Tuple[nx.Graph, ConstraintSet]
        the candidate graph (complete graph minus constraints, every node
        present even when isolated) and the constraint set
    """
    nodes = node_ids(entities)
    constraints = build_constraints(nodes, previous_matches)

    graph = nx.Graph()
    graph.add_nodes_from(range(len(entities)))
    graph.add_edges_from(
        edge
        for edge in combinations(range(len(entities)), 2)
        if ConstraintEdge(*edge) not in constraints
    )
    logger.debug(
        "candidate graph: %d nodes, %d edges, %d constraints",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        len(constraints),
    )
    return graph, constraints


def constraint_count(
    node: NodeId, match: List[NodeId], constraints: ConstraintSet
) -> int:
    """Number of members of ``match`` that ``node`` already met."""
    return sum(1 for other in match if ConstraintEdge.of(node, other) in constraints)


#  LocalWords:  ConstraintEdge ConstraintSet
