#!/usr/bin/env python3
"""
Snow-Crystal Growth Demonstration Script

Grows a crystal from a single frozen seed and reports how it developed:
frozen cell counts, radius, connectivity and symmetry of the final shape.
Prints the crystal as staggered ASCII and writes a JSON results file.
"""

import sys
import os
import json
import logging
from datetime import datetime
from pathlib import Path

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from src.core.automaton import create_automaton
from src.core.errors import CrystalConfigError
from src.patterns.crystal_metrics import measure


def run_snowflake_demo(grid_size=31, steps=200, rule="diffusion", alpha=1.0, beta=0.5,
                       gamma=0.01, growth_probability=0.35, seed=None, log_every=25):
    """Grow a crystal and return metrics."""
    logger.info("=== SNOW CRYSTAL DEMONSTRATION ===")
    logger.info(f"Grid size: {grid_size}x{grid_size}")
    logger.info(f"Rule: {rule}, steps: {steps}")

    automaton = create_automaton(
        grid_size, rule=rule, alpha=alpha, beta=beta, gamma=gamma,
        growth_probability=growth_probability, seed=seed
    )

    frozen_history = [automaton.frozen_count()]
    newly_frozen_history = []

    for step in range(steps):
        newly_frozen = automaton.step()
        newly_frozen_history.append(newly_frozen)
        frozen_history.append(automaton.frozen_count())

        if step % log_every == 0 or step == steps - 1:
            logger.info(f"Step {automaton.step_count()}: frozen={automaton.frozen_count()}, "
                        f"new={newly_frozen}")

    metrics = measure(automaton)

    logger.info("\n=== FINAL METRICS ===")
    logger.info(f"Frozen cells: {metrics.frozen_count}")
    logger.info(f"Radius: {metrics.radius}")
    logger.info(f"Connected: {'YES' if metrics.connected else 'NO'}")
    logger.info(f"Symmetry mismatches: {metrics.symmetry_mismatches}")

    results = {
        "timestamp": datetime.now().isoformat(),
        "grid_size": grid_size,
        "steps": steps,
        "statistics": automaton.get_statistics(),
        "metrics": metrics.to_dict(),
        "frozen_count_history": frozen_history,
        "newly_frozen_history": newly_frozen_history,
        "ascii": automaton.grid.to_ascii(),
    }
    return results


def save_results(results, results_file="logs/snowflake_demo.json"):
    """Save demonstration results to a JSON file."""
    Path(results_file).parent.mkdir(parents=True, exist_ok=True)

    with open(results_file, 'w') as f:
        json.dump(results, f, indent=2)

    logger.info(f"Results saved to: {results_file}")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Snow-Crystal Growth Demonstration")
    parser.add_argument("--grid-size", type=int, default=31, help="Grid size (square)")
    parser.add_argument("--steps", type=int, default=200, help="Growth steps")
    parser.add_argument("--rule", choices=["diffusion", "probabilistic"], default="diffusion",
                        help="Growth rule")
    parser.add_argument("--alpha", type=float, default=1.0, help="Diffusion rate")
    parser.add_argument("--beta", type=float, default=0.5, help="Ambient vapor level")
    parser.add_argument("--gamma", type=float, default=0.01, help="Background vapor per step")
    parser.add_argument("--probability", type=float, default=0.35,
                        help="Per-direction freeze chance (probabilistic rule)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (probabilistic rule)")
    parser.add_argument("--output", default="logs/snowflake_demo.json", help="Results file")

    args = parser.parse_args()

    try:
        results = run_snowflake_demo(
            grid_size=args.grid_size,
            steps=args.steps,
            rule=args.rule,
            alpha=args.alpha,
            beta=args.beta,
            gamma=args.gamma,
            growth_probability=args.probability,
            seed=args.seed
        )
        save_results(results, args.output)

        print()
        print(results["ascii"])
        print(f"\nFrozen cells: {results['metrics']['frozen_count']} "
              f"after {results['steps']} steps")

    except CrystalConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)
