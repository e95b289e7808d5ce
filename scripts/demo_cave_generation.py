#!/usr/bin/env python3
"""
Cave Generation Demonstration Script

Generates a seeded cave, partitions it into regions, places a viewer in the
largest region, computes its field of view and a route across the region,
then prints an ASCII map with the results overlaid.
"""

import sys
import os
import json
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from delve import CaveRuleParams, Stance, World, WorldConfig


def run_cave_demo(width=80, height=40, seed=1, fill=0.45, iterations=5, threshold=4,
                  radius=12.0, angle=None, span=None, stance=Stance.CROUCH):
    """Run the cave demonstration and return metrics and the rendered map."""
    logger.info("=== CAVE GENERATION DEMONSTRATION ===")
    logger.info(f"Grid size: {width}x{height}, seed {seed}")

    config = WorldConfig(size=(width, height), border=(1, 1, 1), viewport=(width, height),
                         seed=seed, rules=CaveRuleParams(fill, iterations, threshold),
                         view_radius=radius)
    world = World(config)
    world.regenerate()

    regions = world.partition()
    largest = max(regions, key=lambda region: region.size) if regions else None
    logger.info(f"Regions: {len(regions)}, largest: {largest.size if largest else 0} cells")
    if largest is None:
        raise RuntimeError("Generated cave has no open cells")

    viewer = largest.origin
    visible = world.calculate_fov(viewer, angle=angle, span=span, stance=stance)
    logger.info(f"Viewer at {viewer} sees {len(visible)} cells")

    # Farthest cell of the region by straight-line distance
    target = max(largest.coords(), key=lambda c: (c.x - viewer.x) ** 2 + (c.y - viewer.y) ** 2)
    path = world.compute_path(viewer, target)
    logger.info(f"Route {viewer} -> {target}: {len(path)} steps")

    rows = [list(line) for line in world.grid.to_ascii().split('\n')]
    for coord in visible:
        if rows[coord.y][coord.x] == '.':
            rows[coord.y][coord.x] = ','
    for step in path:
        rows[step.y][step.x] = '*'
    rows[viewer.y][viewer.x] = '@'
    rendered = '\n'.join(''.join(row) for row in rows)

    stats = world.get_world_stats()
    results = {
        "grid_size": (width, height),
        "seed": seed,
        "rules": config.rules.as_tuple(),
        "solid_ratio": stats['solid_ratio'],
        "generation_ms": stats['last_runtime_ms'],
        "region_count": len(regions),
        "largest_region": largest.size,
        "viewer": tuple(viewer),
        "visible_cells": len(visible),
        "target": tuple(target),
        "path_length": len(path),
        "nodes_explored": stats['total_nodes_explored'],
    }

    logger.info("\n=== FINAL METRICS ===")
    for key, value in results.items():
        logger.info(f"{key}: {value}")

    return results, rendered


def save_demo_log(results, rendered, log_file="logs/cave_demo.log"):
    """Save demonstration results and the map to a log file."""
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    with open(log_file, 'w') as f:
        f.write(json.dumps(results, indent=2))
        f.write("\n\n")
        f.write(rendered)
        f.write("\n")

    logger.info(f"Demonstration log saved to: {log_file}")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Cave Generation Demonstration")
    parser.add_argument("--width", type=int, default=80, help="Grid width")
    parser.add_argument("--height", type=int, default=40, help="Grid height")
    parser.add_argument("--seed", type=int, default=1, help="Random seed")
    parser.add_argument("--fill", type=float, default=0.45, help="Initial solid probability")
    parser.add_argument("--iterations", type=int, default=5, help="Smoothing passes")
    parser.add_argument("--threshold", type=int, default=4, help="Smoothing threshold")
    parser.add_argument("--radius", type=float, default=12.0, help="View radius")
    parser.add_argument("--angle", type=float, default=None, help="Facing angle in degrees")
    parser.add_argument("--span", type=float, default=None, help="Vision cone width in degrees")
    parser.add_argument("--stance", choices=[s.name.lower() for s in Stance], default="crouch",
                        help="Viewer stance")
    parser.add_argument("--log-file", default=None, help="Write metrics and map to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        results, rendered = run_cave_demo(
            width=args.width,
            height=args.height,
            seed=args.seed,
            fill=args.fill,
            iterations=args.iterations,
            threshold=args.threshold,
            radius=args.radius,
            angle=args.angle,
            span=args.span,
            stance=Stance[args.stance.upper()]
        )

        if args.log_file:
            save_demo_log(results, rendered, args.log_file)

        print(rendered)
        print(f"\nRegions: {results['region_count']}, route length: {results['path_length']}")

    except Exception as e:
        logger.error(f"Demonstration failed: {e}")
        sys.exit(1)
