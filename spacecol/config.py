"""
Configuration for the Space Colonization simulation.
"""

import json
import math
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from pathlib import Path
from typing import Optional, Literal

from .errors import ConfigError

RootPlacement = Literal['random', 'base']


@dataclass(frozen=True)
class SimulationConfig:
    radius: float = 0.25              # Influence radius
    kill_distance: float = 0.1        # Points this close to a node are consumed
    move_distance: float = 0.05       # Length of every new segment
    
    num_points: int = 1000
    num_roots: int = 1
    
    max_iter: int = 100
    save_every: int = 10              # Snapshot every N iterations
    
    max_length: int = 100             # Longest root-to-leaf path, in segments
    max_branches: int = 10            # Most children any node may have
    
    # Sampling domain
    domain_radius: float = 1.0
    dimensions: int = 3               # 2 = disk in the z=0 plane, 3 = ball
    root_placement: RootPlacement = 'random'
    
    random_seed: Optional[int] = None
    workers: int = 1                  # KD-tree query workers, -1 = all cores
    
    def __post_init__(self):
        self.validate()
    
    def validate(self):
        for name in ('radius', 'kill_distance', 'move_distance', 'domain_radius'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive finite number, got {value!r}")
        
        for name in ('num_points', 'num_roots', 'save_every', 'max_length', 'max_branches'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        
        if not isinstance(self.max_iter, int) or isinstance(self.max_iter, bool) or self.max_iter < 0:
            raise ConfigError(f"max_iter must be a non-negative integer, got {self.max_iter!r}")
        
        if not self.kill_distance < self.move_distance:
            raise ConfigError(
                f"kill_distance ({self.kill_distance}) must be smaller than "
                f"move_distance ({self.move_distance})"
            )
        if not self.move_distance <= self.radius:
            raise ConfigError(
                f"move_distance ({self.move_distance}) must not exceed radius ({self.radius})"
            )
        
        if self.dimensions not in (2, 3):
            raise ConfigError(f"dimensions must be 2 or 3, got {self.dimensions!r}")
        if self.root_placement not in ('random', 'base'):
            raise ConfigError(f"root_placement must be 'random' or 'base', got {self.root_placement!r}")
        if not isinstance(self.workers, int) or self.workers == 0 or self.workers < -1:
            raise ConfigError(f"workers must be a positive integer or -1, got {self.workers!r}")
    
    def replace(self, **changes) -> 'SimulationConfig':
        """Return a validated copy with ``changes`` applied."""
        return dc_replace(self, **changes)
    
    def to_dict(self) -> dict:
        return asdict(self)
    
    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: str = 'simulation.json') -> SimulationConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        return SimulationConfig()
    
    with open(config_path, 'r') as f:
        data = json.load(f)
    
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    
    return SimulationConfig.from_dict(data)


def save_config(config: SimulationConfig, path: str = 'simulation.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    
    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
