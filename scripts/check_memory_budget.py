#!/usr/bin/env python3
"""
Check memory budget for a full-size world.
Builds and generates a world, then reports the resident memory it added.
"""

import sys
import os
import logging
import psutil

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from delve import create_world


def check_memory_budget(threshold_mb=300.0, width=256, height=256, depth=1, seed=0):
    """Generate a world and compare its memory footprint to a budget.

    Returns:
        Process exit code (0 within budget, 1 over budget)
    """
    process = psutil.Process(os.getpid())
    memory_before = process.memory_info().rss / (1024 ** 2)

    world = create_world(seed=seed, size=(width, height, depth))
    world.partition()

    memory_after = process.memory_info().rss / (1024 ** 2)
    used_mb = memory_after - memory_before
    per_cell = used_mb * 1024 * 1024 / world.grid.volume

    logger.info(f"World {width}x{height}x{depth}: {used_mb:.1f}MB ({per_cell:.0f} bytes/cell)")
    logger.info(f"Threshold: {threshold_mb:.1f}MB")

    if used_mb < threshold_mb:
        logger.info("Memory usage within budget")
        return 0

    logger.error(f"Memory usage {used_mb:.1f}MB exceeds threshold {threshold_mb:.1f}MB")
    return 1


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="World memory budget check")
    parser.add_argument("--threshold", type=float, default=300.0, help="Budget in MB")
    parser.add_argument("--width", type=int, default=256)
    parser.add_argument("--height", type=int, default=256)
    parser.add_argument("--depth", type=int, default=1)
    parser.add_argument("--seed", type=int, default=0)

    args = parser.parse_args()
    exit_code = check_memory_budget(args.threshold, args.width, args.height, args.depth, args.seed)
    sys.exit(exit_code)
