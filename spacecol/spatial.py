"""
Spatial partitioning for efficient nearest-neighbor queries.
Uses scipy's cKDTree for O(log n) lookups instead of O(n) brute force.

Nodes are never removed, so the index is insert-only: new positions are
appended and the KD-tree is rebuilt lazily on the next query.
"""

import numpy as np
from scipy.spatial import cKDTree
from typing import List, Optional, Sequence, Tuple

from .profiling import profile
from .vector import Vector3

# Relative tolerance under which two candidate distances count as a tie.
TIE_TOLERANCE = 1e-12


class NodeSpatialIndex:
    """KD-Tree based index over node positions; index i holds node id i."""
    
    def __init__(self, workers: int = 1):
        self.workers = workers
        self._positions = np.empty((0, 3))
        self._pending: List[np.ndarray] = []
        self._count = 0
        self._tree: Optional[cKDTree] = None
        self._dirty = False
    
    def __len__(self) -> int:
        return self._count
    
    def insert(self, positions: np.ndarray):
        positions = np.asarray(positions, dtype=float).reshape(-1, 3)
        if len(positions) == 0:
            return
        self._pending.append(positions)
        self._count += len(positions)
        self._dirty = True
    
    def sync(self, positions: Sequence[Tuple[float, float, float]]):
        """Insert whatever positions the index has not seen yet."""
        known = self._count
        if len(positions) > known:
            self.insert(np.array(positions[known:], dtype=float))
    
    @profile
    def rebuild(self):
        if self._pending:
            self._positions = np.vstack([self._positions] + self._pending)
            self._pending = []
        if len(self._positions) == 0:
            self._tree = None
        else:
            self._tree = cKDTree(self._positions)
        self._dirty = False
    
    @property
    def tree(self) -> Optional[cKDTree]:
        if self._dirty:
            self.rebuild()
        return self._tree
    
    def _resolve_tie(self, point: np.ndarray, best: float) -> Tuple[int, float]:
        """Lowest id among the nodes at (numerically) the minimum distance."""
        candidates = self.tree.query_ball_point(point, best * (1.0 + 1e-9) + 1e-15)
        candidates = np.asarray(sorted(candidates), dtype=int)
        dists = np.linalg.norm(self._positions[candidates] - point, axis=1)
        d_min = dists.min()
        tied = candidates[dists <= d_min + TIE_TOLERANCE * max(1.0, d_min)]
        winner = int(tied.min())
        return winner, float(np.linalg.norm(self._positions[winner] - point))
    
    @profile
    def query_batch(self, points: np.ndarray, radius: float = np.inf) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nearest node for every query point, restricted to distance <= radius.
        
        Returns (ids, distances). Points with no node within ``radius`` get id -1
        and distance inf. Equidistant candidates resolve to the lowest node id.
        """
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        ids = np.full(len(points), -1, dtype=int)
        distances = np.full(len(points), np.inf)
        
        tree = self.tree
        if tree is None or len(points) == 0:
            return ids, distances
        
        k = min(2, len(self))
        d, idx = tree.query(points, k=k, workers=self.workers)
        if k == 1:
            d = d[:, None]
            idx = idx[:, None]
        
        nearest = idx[:, 0].astype(int)
        best = np.linalg.norm(self._positions[nearest] - points, axis=1)
        
        if k == 2:
            ties = np.flatnonzero(d[:, 1] - d[:, 0] <= TIE_TOLERANCE * np.maximum(1.0, d[:, 0]))
            for i in ties:
                nearest[i], best[i] = self._resolve_tie(points[i], best[i])
        
        within = best <= radius
        ids[within] = nearest[within]
        distances[within] = best[within]
        return ids, distances
    
    def nearest_within(self, point: Vector3, radius: float = np.inf) -> Optional[Tuple[int, float]]:
        """Nearest node id and distance to ``point`` within ``radius``, or None."""
        ids, distances = self.query_batch(point.to_array()[None, :], radius)
        if ids[0] < 0:
            return None
        return int(ids[0]), float(distances[0])
