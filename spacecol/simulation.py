"""
Simulation driver - sequences engine steps and hands snapshots to a callback.

The driver holds no growth logic. It samples (or accepts) the initial
attractors and roots, calls ``ColonizationEngine.step`` until one of the
termination conditions holds, and reports progress.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import numpy as np
from tqdm import tqdm

from .attractor import AttractionPointSet
from .config import SimulationConfig
from .engine import ColonizationEngine
from .errors import ConfigError
from .node import NodeView
from .sampling import make_rng
from .tree import GrowthTree

# Called with (iteration, nodes, active_point_count).
SnapshotCallback = Callable[[int, Tuple[NodeView, ...], int], None]

MAX_ITER = 'max_iter'
EXHAUSTED = 'exhausted'
STALLED = 'stalled'


@dataclass
class SimulationResult:
    tree: GrowthTree
    points: AttractionPointSet
    iterations: int
    termination: str
    
    @property
    def nodes(self) -> Tuple[NodeView, ...]:
        return self.tree.views()
    
    @property
    def active_point_count(self) -> int:
        return self.points.active_count


class Simulation:
    def __init__(
        self,
        config: SimulationConfig,
        attraction_points: Optional[np.ndarray] = None,
        root_positions: Optional[np.ndarray] = None
    ):
        self.config = config
        self.engine = ColonizationEngine(config)
        
        rng = make_rng(config.random_seed)
        
        if attraction_points is None:
            self.points = AttractionPointSet.sample(config, rng)
        else:
            self.points = AttractionPointSet.from_positions(attraction_points)
            if len(self.points) != config.num_points:
                raise ConfigError(
                    f"Expected {config.num_points} attraction points, got {len(self.points)}"
                )
        
        self.tree = GrowthTree.init_roots(
            config,
            placement=root_positions,
            rng=rng
        )
    
    def _emit(self, callback: Optional[SnapshotCallback]):
        if callback:
            callback(self.tree.iteration, self.tree.views(), self.points.active_count)
    
    def run(self, callback: Optional[SnapshotCallback] = None, verbose: bool = False) -> SimulationResult:
        """
        Run the growth loop until completion.
        
        ``callback`` receives a read-only snapshot every ``save_every``
        iterations and once more at termination.
        Returns a SimulationResult with the final tree and attractors.
        """
        config = self.config
        
        if verbose:
            print("Starting growth:")
            print(f"  Attractors: {len(self.points)}")
            print(f"  Roots: {len(self.tree.roots)}")
            print(f"  Max iterations: {config.max_iter}")
        
        termination = MAX_ITER
        last_emitted = None
        
        with tqdm(total=config.max_iter, desc="Growing", disable=not verbose) as progress:
            while True:
                if self.tree.iteration >= config.max_iter:
                    termination = MAX_ITER
                    break
                if self.points.active_count == 0:
                    termination = EXHAUSTED
                    break
                
                result = self.engine.step(self.tree, self.points)
                progress.update(1)
                
                if not result.grew:
                    termination = STALLED
                    break
                
                if result.iteration % config.save_every == 0:
                    self._emit(callback)
                    last_emitted = result.iteration
                    if verbose:
                        tqdm.write(f"  Iteration {result.iteration}: {len(self.tree)} nodes, "
                                   f"{result.active_point_count} attractors remaining")
        
        if last_emitted != self.tree.iteration:
            self._emit(callback)
        
        if verbose:
            print(f"Growth complete after {self.tree.iteration} iterations ({termination})")
            print(f"  Final nodes: {len(self.tree)}")
            print(f"  Remaining attractors: {self.points.active_count}")
        
        return SimulationResult(
            tree=self.tree,
            points=self.points,
            iterations=self.tree.iteration,
            termination=termination
        )


def run(
    config: SimulationConfig,
    callback: Optional[SnapshotCallback] = None,
    attraction_points: Optional[np.ndarray] = None,
    root_positions: Optional[np.ndarray] = None,
    verbose: bool = False
) -> GrowthTree:
    """Grow a tree for ``config`` and return it."""
    simulation = Simulation(config, attraction_points, root_positions)
    return simulation.run(callback, verbose=verbose).tree
