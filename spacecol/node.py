"""
Node class - a single point of the growing tree structure.
"""

from typing import NamedTuple, Optional, Tuple
from .vector import Vector3


class NodeView(NamedTuple):
    """Immutable snapshot of a node handed to callbacks and exporters."""
    id: int
    position: Tuple[float, float, float]
    parent_id: Optional[int]


class Node:
    __slots__ = ('_id', '_position', '_parent_id', '_growth_direction', '_iteration', '_depth')
    
    def __init__(
        self,
        node_id: int,
        position: Vector3,
        parent_id: Optional[int] = None,
        growth_direction: Optional[Vector3] = None,
        iteration: int = 0,
        depth: int = 0
    ):
        self._id = node_id
        self._position = position.copy()
        self._parent_id = parent_id
        self._growth_direction = growth_direction.copy() if growth_direction is not None else Vector3()
        self._iteration = iteration
        self._depth = depth
    
    @property
    def id(self) -> int:
        return self._id
    
    @property
    def position(self) -> Vector3:
        return self._position.copy()
    
    @property
    def parent_id(self) -> Optional[int]:
        return self._parent_id
    
    @property
    def growth_direction(self) -> Vector3:
        return self._growth_direction.copy()
    
    @property
    def iteration(self) -> int:
        """Iteration that created this node; 0 for roots."""
        return self._iteration
    
    @property
    def depth(self) -> int:
        """Number of segments between this node and its root."""
        return self._depth
    
    @property
    def is_root(self) -> bool:
        return self._parent_id is None
    
    def view(self) -> NodeView:
        return NodeView(self._id, self._position.to_tuple(), self._parent_id)
    
    def __repr__(self) -> str:
        return f"Node({self._id}, {self._position}, parent={self._parent_id})"
