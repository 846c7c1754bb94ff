"""
Main entry point for the Space Colonization simulation.

Configuration is loaded from simulation.json (defaults when missing).
Prints a summary of the grown tree; exporting and rendering are left to
the snapshot callback of the caller.
"""

from spacecol import Simulation, load_config
from spacecol.profiling import profiler


def main():
    config = load_config()
    
    print("Running space colonization")
    print(f"  Influence radius: {config.radius}")
    print(f"  Kill distance: {config.kill_distance}")
    print(f"  Move distance: {config.move_distance}")
    print()
    
    profiler.enable()
    result = Simulation(config).run(verbose=True)
    profiler.disable()
    profiler.print_stats()

    tree = result.tree
    max_depth = max(tree.depth(n.id) for n in tree.leaves())
    print(f"\nGenerated {len(tree)} nodes in {result.iterations} iterations")
    print(f"  Leaves: {len(tree.leaves())}")
    print(f"  Max depth: {max_depth}")
    print(f"  Branching nodes: {sum(1 for c in tree.branch_counts().values() if c > 1)}")


if __name__ == '__main__':
    main()
