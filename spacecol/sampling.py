"""
Sampling utilities for attractor and root placement.

Provides two root placement methods:
- random: Uniform random sampling within the bounding volume
- base: Uniform random sampling on a base disk (3D) or base line (2D) inside the volume
"""

import numpy as np
from typing import Optional

from .config import SimulationConfig, RootPlacement


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def sample_in_ball(rng: np.random.Generator, count: int, radius: float) -> np.ndarray:
    """Sample ``count`` points uniformly inside a 3D ball. Returns (count, 3)."""
    directions = rng.normal(size=(count, 3))
    norms = np.linalg.norm(directions, axis=1, keepdims=True)
    norms[norms < 1e-12] = 1.0
    directions = directions / norms
    radii = radius * np.cbrt(rng.random(count))
    return directions * radii[:, None]


def sample_in_disk(rng: np.random.Generator, count: int, radius: float, z: float = 0.0) -> np.ndarray:
    """Sample ``count`` points uniformly inside a disk lying in the plane ``z``."""
    angles = rng.uniform(0.0, 2.0 * np.pi, size=count)
    radii = radius * np.sqrt(rng.random(count))
    points = np.empty((count, 3))
    points[:, 0] = radii * np.cos(angles)
    points[:, 1] = radii * np.sin(angles)
    points[:, 2] = z
    return points


def sample_attractors(config: SimulationConfig, rng: np.random.Generator) -> np.ndarray:
    """Sample ``config.num_points`` attractor positions in the bounding volume."""
    if config.dimensions == 2:
        return sample_in_disk(rng, config.num_points, config.domain_radius)
    return sample_in_ball(rng, config.num_points, config.domain_radius)


def sample_roots(
    config: SimulationConfig,
    rng: np.random.Generator,
    placement: Optional[RootPlacement] = None
) -> np.ndarray:
    """
    Generate ``config.num_roots`` root positions.
    
    Args:
        config: Simulation configuration
        rng: Random generator
        placement: 'random' for the whole volume, 'base' for the base plane.
                   Defaults to ``config.root_placement``.
    """
    placement = placement or config.root_placement
    count = config.num_roots
    r = config.domain_radius
    
    if placement == 'random':
        if config.dimensions == 2:
            return sample_in_disk(rng, count, r)
        return sample_in_ball(rng, count, r)
    
    # Base sits halfway down so that it stays inside the sampling volume.
    offset = -0.5 * r
    half_chord = np.sqrt(r ** 2 - offset ** 2)
    if config.dimensions == 2:
        points = np.zeros((count, 3))
        points[:, 0] = rng.uniform(-half_chord, half_chord, size=count)
        points[:, 1] = offset
        return points
    return sample_in_disk(rng, count, half_chord, z=offset)
