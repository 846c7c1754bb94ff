"""
GrowthTree - append-only forest of nodes grown by the colonization engine.

Every node, not just the current leaves, can receive a new child in an
iteration. Node ids are assigned densely from 0 in creation order, so the id
of a node is also its index in the node list.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
import numpy as np

from .config import SimulationConfig, RootPlacement
from .errors import ConfigError, StructuralError
from .node import Node, NodeView
from .sampling import make_rng, sample_roots
from .spatial import NodeSpatialIndex
from .vector import Vector3


class GrowthTree:
    def __init__(self):
        self._nodes: List[Node] = []
        self._children: List[List[int]] = []
        self._positions: List[Tuple[float, float, float]] = []
        self._index = NodeSpatialIndex()
        self.iteration = 0
    
    @classmethod
    def init_roots(
        cls,
        config: SimulationConfig,
        placement: Union[None, RootPlacement, Sequence, np.ndarray] = None,
        rng: Optional[np.random.Generator] = None
    ) -> 'GrowthTree':
        """
        Create a tree holding ``config.num_roots`` roots.
        
        Args:
            config: Simulation configuration
            placement: Explicit root positions (array-like of shape (num_roots, 2|3)),
                       or a placement method name ('random' / 'base').
                       None uses ``config.root_placement``.
            rng: Random generator used when positions are generated
        """
        if placement is None or isinstance(placement, str):
            if rng is None:
                rng = make_rng(config.random_seed)
            positions = sample_roots(config, rng, placement)
        else:
            positions = np.asarray(placement, dtype=float)
            if positions.ndim != 2 or positions.shape[1] not in (2, 3):
                raise ConfigError(f"Root positions must have shape (n, 2) or (n, 3), got {positions.shape}")
            if len(positions) != config.num_roots:
                raise ConfigError(
                    f"Expected {config.num_roots} root positions, got {len(positions)}"
                )
        
        tree = cls()
        for pos in positions:
            tree.add_root(Vector3.from_array(pos))
        return tree
    
    def _append(self, node: Node) -> int:
        self._nodes.append(node)
        self._children.append([])
        self._positions.append(node.position.to_tuple())
        return node.id
    
    def add_root(self, position: Vector3) -> int:
        if self.iteration > 0:
            raise StructuralError("Roots can only be added before growth starts")
        return self._append(Node(len(self._nodes), position, parent_id=None))
    
    def add_node(self, parent_id: int, position: Vector3, direction: Vector3) -> int:
        """Append a child of ``parent_id`` and return its id."""
        if (
            not isinstance(parent_id, (int, np.integer))
            or isinstance(parent_id, (bool, np.bool_))
            or not 0 <= parent_id < len(self._nodes)
        ):
            raise StructuralError(f"Parent node {parent_id!r} does not exist")
        
        parent_id = int(parent_id)
        node = Node(
            len(self._nodes),
            position,
            parent_id=parent_id,
            growth_direction=direction,
            iteration=self.iteration + 1,
            depth=self._nodes[parent_id].depth + 1
        )
        self._children[parent_id].append(node.id)
        return self._append(node)
    
    def nodes(self) -> List[Node]:
        return list(self._nodes)
    
    def node(self, node_id: int) -> Node:
        if not 0 <= node_id < len(self._nodes):
            raise StructuralError(f"Node {node_id!r} does not exist")
        return self._nodes[node_id]
    
    def __len__(self) -> int:
        return len(self._nodes)
    
    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)
    
    def views(self) -> Tuple[NodeView, ...]:
        return tuple(n.view() for n in self._nodes)
    
    @property
    def positions(self) -> np.ndarray:
        """(n, 3) array of node positions ordered by id."""
        return np.array(self._positions, dtype=float).reshape(-1, 3)
    
    @property
    def spatial_index(self) -> NodeSpatialIndex:
        """Nearest-node index, brought up to date with the current nodes."""
        self._index.sync(self._positions)
        return self._index
    
    @property
    def roots(self) -> List[Node]:
        return [n for n in self._nodes if n.is_root]
    
    def children(self, node_id: int) -> List[Node]:
        self.node(node_id)
        return [self._nodes[c] for c in self._children[node_id]]
    
    def leaves(self) -> List[Node]:
        return [n for n in self._nodes if not self._children[n.id]]
    
    def depth(self, node_id: int) -> int:
        return self.node(node_id).depth
    
    def child_count(self, node_id: int) -> int:
        self.node(node_id)
        return len(self._children[node_id])
    
    def root_of(self, node_id: int) -> Node:
        current = self.node(node_id)
        while current.parent_id is not None:
            current = self._nodes[current.parent_id]
        return current
    
    def segments(self) -> List[Tuple[Tuple[float, float, float], Tuple[float, float, float]]]:
        """Return all (child, parent) position pairs for drawing."""
        return [
            (self._positions[n.id], self._positions[n.parent_id])
            for n in self._nodes if n.parent_id is not None
        ]
    
    def branch_counts(self) -> Dict[int, int]:
        """Map node id to its number of children, for nodes that have any."""
        return {i: len(c) for i, c in enumerate(self._children) if c}
