"""
Attractors - growth hormone sources that guide branch development.

The set's ``_active`` array is the only record of which points are alive;
AttractionPoint objects are views onto it.
"""

from typing import Iterator, Optional, Tuple
import numpy as np

from .config import SimulationConfig
from .errors import ConfigError, StructuralError
from .sampling import make_rng, sample_attractors
from .vector import Vector3


class AttractionPoint:
    __slots__ = ('_set', '_index')
    
    def __init__(self, point_set: 'AttractionPointSet', index: int):
        self._set = point_set
        self._index = index
    
    @property
    def index(self) -> int:
        return self._index
    
    @property
    def position(self) -> Vector3:
        return Vector3.from_array(self._set.positions[self._index])
    
    @property
    def active(self) -> bool:
        return self._set.is_active(self._index)
    
    def kill(self):
        self._set.kill(self._index)
    
    def __repr__(self) -> str:
        status = "active" if self.active else "killed"
        return f"AttractionPoint({self.position}, {status})"


class ActivePoints:
    """
    Restartable view over the active points of a set.
    
    Every iteration re-reads the live status, so points killed between two
    passes are skipped by the second one.
    """
    
    def __init__(self, point_set: 'AttractionPointSet'):
        self._set = point_set
    
    def __iter__(self) -> Iterator[Tuple[int, Vector3]]:
        for index in self._set.active_indices:
            yield int(index), Vector3.from_array(self._set.positions[index])
    
    def __len__(self) -> int:
        return self._set.active_count


class AttractionPointSet:
    """Fixed-size collection of attraction points with monotonic culling."""
    
    def __init__(self, positions: np.ndarray):
        positions = np.asarray(positions, dtype=float)
        if positions.ndim != 2 or positions.shape[1] not in (2, 3):
            raise ConfigError(f"Attraction points must have shape (n, 2) or (n, 3), got {positions.shape}")
        if positions.shape[1] == 2:
            positions = np.column_stack([positions, np.zeros(len(positions))])
        
        self._positions = positions.copy()
        self._positions.setflags(write=False)
        self._active = np.ones(len(positions), dtype=bool)
    
    @classmethod
    def sample(
        cls,
        config: SimulationConfig,
        rng: Optional[np.random.Generator] = None
    ) -> 'AttractionPointSet':
        """Sample ``config.num_points`` active points uniformly in the bounding volume."""
        if rng is None:
            rng = make_rng(config.random_seed)
        return cls(sample_attractors(config, rng))
    
    @classmethod
    def from_positions(cls, positions) -> 'AttractionPointSet':
        return cls(np.asarray(positions, dtype=float))
    
    def __len__(self) -> int:
        return len(self._positions)
    
    def __getitem__(self, index: int) -> AttractionPoint:
        if not 0 <= index < len(self):
            raise IndexError(f"Attraction point index {index} out of range")
        return AttractionPoint(self, index)
    
    def active_points(self) -> ActivePoints:
        return ActivePoints(self)
    
    def kill(self, index: int):
        if not 0 <= index < len(self):
            raise StructuralError(f"Attraction point index {index} out of range")
        self._active[index] = False
    
    def kill_many(self, indices):
        for index in indices:
            self.kill(int(index))
    
    def is_active(self, index: int) -> bool:
        return bool(self._active[index])
    
    @property
    def positions(self) -> np.ndarray:
        """Read-only (n, 3) array of all positions, killed points included."""
        return self._positions
    
    @property
    def active_mask(self) -> np.ndarray:
        return self._active.copy()
    
    @property
    def active_indices(self) -> np.ndarray:
        return np.flatnonzero(self._active)
    
    @property
    def active_count(self) -> int:
        return int(self._active.sum())
