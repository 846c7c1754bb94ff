"""
ColonizationEngine - one influence / extend / cull iteration.

Each active attractor claims the nearest node within the influence radius.
Every claimed node grows a single child of fixed length toward the average
direction of its attractors. Attractors that end up within the kill distance
of any node, new ones included, are consumed.

The engine keeps no state of its own: everything it reads or writes lives in
the GrowthTree and AttractionPointSet passed to ``step``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import numpy as np

from .attractor import AttractionPointSet
from .config import SimulationConfig
from .profiling import profile
from .tree import GrowthTree
from .vector import EPSILON, Vector3, normalize


@dataclass(frozen=True)
class StepResult:
    iteration: int
    new_node_ids: Tuple[int, ...] = ()
    killed: Tuple[int, ...] = ()
    influenced_nodes: int = 0
    active_point_count: int = 0
    
    @property
    def grew(self) -> bool:
        return len(self.new_node_ids) > 0


@dataclass
class Influence:
    """Accumulated pull on one node during an iteration."""
    direction_sum: np.ndarray = field(default_factory=lambda: np.zeros(3))
    count: int = 0


class ColonizationEngine:
    def __init__(self, config: SimulationConfig):
        self.config = config
    
    @profile
    def _associate_attractors(
        self,
        tree: GrowthTree,
        points: AttractionPointSet
    ) -> Dict[int, Influence]:
        """
        Map node id -> summed unit directions of the attractors it won.
        
        Keys come out in ascending node id regardless of query scheduling.
        """
        active = points.active_indices
        if len(active) == 0 or len(tree) == 0:
            return {}
        
        index = tree.spatial_index
        index.workers = self.config.workers
        
        positions = points.positions[active]
        node_ids, _ = index.query_batch(positions, radius=self.config.radius)
        
        claimed = node_ids >= 0
        if not claimed.any():
            return {}
        
        node_ids = node_ids[claimed]
        diff = positions[claimed] - tree.positions[node_ids]
        norms = np.linalg.norm(diff, axis=1)
        
        # An attractor sitting exactly on its node has no direction.
        usable = norms >= EPSILON
        node_ids = node_ids[usable]
        directions = diff[usable] / norms[usable, None]
        
        unique_ids, inverse = np.unique(node_ids, return_inverse=True)
        sums = np.zeros((len(unique_ids), 3))
        np.add.at(sums, inverse, directions)
        counts = np.bincount(inverse, minlength=len(unique_ids))
        
        return {
            int(nid): Influence(direction_sum=sums[i], count=int(counts[i]))
            for i, nid in enumerate(unique_ids)
        }
    
    @profile
    def _grow_nodes(self, tree: GrowthTree, influences: Dict[int, Influence]) -> List[int]:
        """
        Create at most one child per influenced node, in node id order.
        
        Nodes already at max_length depth or holding max_branches children
        are left as they are.
        """
        new_ids = []
        move_distance = self.config.move_distance
        
        for node_id in sorted(influences):
            influence = influences[node_id]
            if influence.count == 0:
                continue
            if tree.depth(node_id) >= self.config.max_length:
                continue
            if tree.child_count(node_id) >= self.config.max_branches:
                continue

            average = Vector3.from_array(influence.direction_sum / influence.count)
            direction, ok = normalize(average)
            if not ok:
                continue
            
            parent = tree.node(node_id)
            new_position = parent.position + direction * move_distance
            new_ids.append(tree.add_node(node_id, new_position, direction))
        
        return new_ids
    
    @profile
    def _kill_attractors(self, tree: GrowthTree, points: AttractionPointSet) -> List[int]:
        """Deactivate attractors within kill_distance of any node."""
        active = points.active_indices
        if len(active) == 0 or len(tree) == 0:
            return []
        
        index = tree.spatial_index
        index.workers = self.config.workers
        
        node_ids, _ = index.query_batch(points.positions[active], radius=self.config.kill_distance)
        killed = [int(i) for i in active[node_ids >= 0]]
        points.kill_many(killed)
        return killed
    
    def step(self, tree: GrowthTree, points: AttractionPointSet) -> StepResult:
        """
        Perform one growth iteration on ``tree`` and ``points``.
        
        Culling runs after extension so brand-new nodes consume attractors
        in the same iteration.
        """
        influences = self._associate_attractors(tree, points)
        new_ids = self._grow_nodes(tree, influences)
        killed = self._kill_attractors(tree, points)
        
        tree.iteration += 1
        
        return StepResult(
            iteration=tree.iteration,
            new_node_ids=tuple(new_ids),
            killed=tuple(killed),
            influenced_nodes=len(influences),
            active_point_count=points.active_count
        )
