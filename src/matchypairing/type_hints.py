"""Type hints used in Matchy Pairing."""

from typing import Hashable, List, Tuple, TypeVar

# anything with equality and a hash can be paired
Entity = TypeVar("Entity", bound=Hashable)

# A group of 2 (or 3) entities meeting in one round
Match = List[Entity]

# Dense index of an entity in the shuffled participant list
NodeId = int

# Matched pair of node ids, lower id first
NodeEdge = Tuple[NodeId, NodeId]

# Discord snowflake ids
UserId = int

#  LocalWords:  NodeId NodeEdge
