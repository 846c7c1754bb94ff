"""
Tests for one influence / extend / cull iteration.
"""

import numpy as np
import pytest

from spacecol.attractor import AttractionPointSet
from spacecol.config import SimulationConfig
from spacecol.engine import ColonizationEngine
from spacecol.tree import GrowthTree
from spacecol.vector import Vector3, normalize


def _setup(points, roots=((0.0, 0.0, 0.0),), **overrides):
    params = dict(radius=0.1, kill_distance=0.01, move_distance=0.02, max_iter=1)
    params.update(overrides)
    config = SimulationConfig(num_points=len(points), num_roots=len(roots), **params)
    tree = GrowthTree.init_roots(config, placement=np.array(roots, dtype=float))
    point_set = AttractionPointSet.from_positions(np.array(points, dtype=float))
    return config, tree, point_set


def _min_distances(tree, point_set):
    diff = point_set.positions[:, None, :] - tree.positions[None, :, :]
    return np.linalg.norm(diff, axis=2).min(axis=1)


class TestSingleStep:
    """The concrete single-root scenario."""
    
    def test_one_child_toward_average_direction(self):
        """One root grows exactly one child along the mean attractor direction."""
        rng = np.random.default_rng(2024)
        directions = rng.normal(size=(50, 3))
        directions /= np.linalg.norm(directions, axis=1, keepdims=True)
        points = directions * (0.15 * np.cbrt(rng.random(50)))[:, None]
        
        config, tree, point_set = _setup(points)
        root = tree.node(0).position
        
        in_range = [p for p in points if np.linalg.norm(p) <= config.radius]
        assert in_range, "scenario needs at least one attractor in range"
        total = Vector3()
        for p in in_range:
            unit, _ = normalize(Vector3.from_array(p) - root)
            total = total + unit
        expected_dir, ok = normalize(total / len(in_range))
        assert ok
        expected = root + expected_dir * config.move_distance
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert len(tree) == 2
        assert result.new_node_ids == (1,)
        child = tree.node(1)
        assert child.parent_id == 0
        assert child.position.isclose(expected)
        assert child.growth_direction.isclose(expected_dir)
        
        dists = _min_distances(tree, point_set)
        for i, d in enumerate(dists):
            assert point_set.is_active(i) == (d > config.kill_distance)
    
    def test_step_result_reports_kills(self):
        """Points consumed during the step are listed in the result."""
        config, tree, point_set = _setup([[0.005, 0, 0], [0.05, 0, 0]])
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert result.killed == (0,)
        assert result.active_point_count == 1
        assert result.iteration == 1
        assert tree.iteration == 1


class TestBoundaries:
    """Inclusive influence and kill boundaries."""
    
    def test_point_at_radius_influences(self):
        """An attractor exactly at the radius pulls the node."""
        config, tree, point_set = _setup([[0.1, 0, 0]])
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert result.grew
        assert tree.node(1).position.isclose(Vector3(0.02, 0, 0))
    
    def test_point_beyond_radius_does_not(self):
        """An attractor just outside the radius is ignored and stays active."""
        config, tree, point_set = _setup([[0.1 + 1e-9, 0, 0]])
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert not result.grew
        assert len(tree) == 1
        assert point_set.is_active(0)
    
    def test_point_at_kill_distance_is_killed(self):
        """An attractor exactly at kill_distance is consumed."""
        config, tree, point_set = _setup([[0.01, 0, 0]])
        
        ColonizationEngine(config).step(tree, point_set)
        
        assert not point_set.is_active(0)
    
    def test_new_node_kills_in_same_iteration(self):
        """Culling sees nodes created during the same step."""
        config, tree, point_set = _setup([[0.025, 0, 0]])
        
        ColonizationEngine(config).step(tree, point_set)
        
        assert len(tree) == 2
        assert not point_set.is_active(0)


class TestGrowthRules:
    """Branching and degenerate cases."""
    
    def test_cancelling_directions_skip_growth(self):
        """Opposite attractors cancel out and the node does not grow."""
        config, tree, point_set = _setup([[0.05, 0, 0], [-0.05, 0, 0]])
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert not result.grew
        assert result.influenced_nodes == 1
        assert point_set.active_count == 2
    
    def test_at_most_one_child_per_node(self):
        """Many attractors on one node still produce a single child."""
        points = [[0.05, 0.01 * i, 0] for i in range(-3, 4)]
        config, tree, point_set = _setup(points)
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert len(result.new_node_ids) == 1
    
    def test_tie_goes_to_lowest_id(self):
        """An attractor equidistant to two roots pulls the lower id."""
        config, tree, point_set = _setup(
            [[0.0, 0.03, 0.0]],
            roots=((-0.05, 0.0, 0.0), (0.05, 0.0, 0.0))
        )
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert result.new_node_ids == (2,)
        assert tree.node(2).parent_id == 0
    
    def test_several_roots_grow_in_id_order(self):
        """Each influenced root grows once, children numbered by parent id."""
        config, tree, point_set = _setup(
            [[1.05, 0, 0], [0.05, 0, 0]],
            roots=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        )
        
        ColonizationEngine(config).step(tree, point_set)
        
        assert [tree.node(i).parent_id for i in (2, 3)] == [0, 1]
    
    def test_interior_nodes_can_branch(self):
        """Any node, not only leaves, may receive a new child."""
        config, tree, point_set = _setup([[0.0, 0.05, 0.0], [0.2, 0.0, 0.0]], radius=0.1)
        tree.add_node(0, Vector3(0.02, 0, 0), Vector3(1, 0, 0))
        
        result = ColonizationEngine(config).step(tree, point_set)

        assert result.new_node_ids == (2,)
        assert tree.node(2).parent_id == 0
        assert tree.branch_counts()[0] == 2
    
    def test_no_active_points(self):
        """With every attractor consumed the step is a no-op."""
        config, tree, point_set = _setup([[0.05, 0, 0]])
        point_set.kill(0)
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert not result.grew
        assert result.influenced_nodes == 0
    
    def test_point_killed_through_view_does_not_pull(self):
        """A point killed via its object no longer influences growth."""
        config, tree, point_set = _setup([[0.05, 0, 0]])
        point_set[0].kill()
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert not result.grew
        assert result.active_point_count == 0


class TestGrowthLimits:
    """max_length and max_branches cap growth on top of the per-step rule."""
    
    def test_max_length_stops_deep_nodes(self):
        """A node at max_length depth no longer grows."""
        config, tree, point_set = _setup([[0.5, 0, 0]], radius=1.0, max_length=1)
        engine = ColonizationEngine(config)
        
        first = engine.step(tree, point_set)
        second = engine.step(tree, point_set)
        
        assert first.new_node_ids == (1,)
        assert tree.node(1).depth == 1
        assert not second.grew
        assert len(tree) == 2
        assert point_set.is_active(0)
    
    def test_max_branches_stops_crowded_nodes(self):
        """A node that already has max_branches children no longer grows."""
        config, tree, point_set = _setup([[0.0, 0.05, 0.0]], max_branches=1)
        tree.add_node(0, Vector3(0.02, 0, 0), Vector3(1, 0, 0))
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert result.influenced_nodes == 1
        assert not result.grew
        assert tree.child_count(0) == 1
    
    def test_limits_do_not_block_other_nodes(self):
        """A capped node is skipped while its neighbours keep growing."""
        config, tree, point_set = _setup(
            [[0.05, 0, 0], [1.05, 0, 0]],
            roots=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
            max_branches=1
        )
        tree.add_node(0, Vector3(0.0, 0.02, 0), Vector3(0, 1, 0))
        
        result = ColonizationEngine(config).step(tree, point_set)
        
        assert result.new_node_ids == (3,)
        assert tree.node(3).parent_id == 1
