"""
Space Colonization Algorithm (SCA) for 3D branching structures.

Based on: "Modeling Trees with a Space Colonization Algorithm" 
by Runions, Lane, and Prusinkiewicz (2007).
"""

from .vector import Vector3
from .errors import ConfigError, StructuralError
from .config import SimulationConfig, load_config, save_config
from .attractor import AttractionPoint, AttractionPointSet
from .node import Node, NodeView
from .tree import GrowthTree
from .spatial import NodeSpatialIndex
from .engine import ColonizationEngine, StepResult
from .simulation import Simulation, SimulationResult, run

__all__ = [
    'Vector3',
    'ConfigError',
    'StructuralError',
    'SimulationConfig',
    'load_config',
    'save_config',
    'AttractionPoint',
    'AttractionPointSet',
    'Node',
    'NodeView',
    'GrowthTree',
    'NodeSpatialIndex',
    'ColonizationEngine',
    'StepResult',
    'Simulation',
    'SimulationResult',
    'run'
]
