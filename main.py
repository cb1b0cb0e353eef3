"""
Genetic Snake – Main Entry Point
================================

Usage examples:
  python main.py                                  # full movement snakes, 40x40 grid
  python main.py --species forward_only           # relative-turn snakes
  python main.py --gens 500 --pop 2000            # custom parameters
  python main.py --activation sigmoid             # different neuron activation
  python main.py --mutation 0.4 --seed 7          # heavier mutation, reproducible run
  python main.py --workers 4                      # survival pass on 4 threads
"""

import argparse
import os

import numpy as np

from snake_factory import SnakeFactory
from snake_pit     import SnakePit
from visualizer    import (ensure_dirs, append_csv, save_replay_snapshot,
                           save_replay_animation, save_evolution_chart)
from activation    import ACTIVATIONS
from species       import SPECIES as SPECIES_NAMES
from config import (SAVE_DIR, SNAPSHOT_INTERVAL, SAVE_ANIMATION,
                    GRID_WIDTH, GRID_HEIGHT, POPULATION, MAX_GENERATIONS,
                    MUTATION_RATE, SPECIES, ACTIVATION, WORKERS)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Genetic Snake – neural network snakes evolved by a genetic algorithm")
    p.add_argument("--species",    default=SPECIES, choices=sorted(SPECIES_NAMES),
                   help="Snake species")
    p.add_argument("--activation", default=ACTIVATION, choices=sorted(ACTIVATIONS),
                   help="Neuron activation function")
    p.add_argument("--width",      type=int,   default=GRID_WIDTH,
                   help="Grid width in cells")
    p.add_argument("--height",     type=int,   default=GRID_HEIGHT,
                   help="Grid height in cells")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--pop",        type=int,   default=POPULATION,
                   help="Population size")
    p.add_argument("--mutation",   type=float, default=MUTATION_RATE,
                   help="Probability each weight/bias is mutated")
    p.add_argument("--no_mutation",action="store_true",
                   help="Set mutation rate to 0 (demonstration)")
    p.add_argument("--workers",    type=int,   default=WORKERS,
                   help="Threads for the survival pass")
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--snapshot_interval", type=int, default=SNAPSHOT_INTERVAL,
                   help="Save a replay of the best snake every N generations")
    p.add_argument("--no_animation", action="store_true",
                   help="Skip the animated GIF replays")
    return p.parse_args(argv)


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class PitCallbacks:
    """Bundles the per-generation outputs written during a run."""

    def __init__(self, outdir: str, snapshot_interval: int, save_animation: bool):
        self.outdir            = outdir
        self.snapshot_interval = snapshot_interval
        self.save_animation    = save_animation

    def on_generation(self, record, pit):
        generation = record["generation"]

        # CSV log
        append_csv(record, self.outdir)

        # Replay of the best snake
        if generation == 1 or generation % self.snapshot_interval == 0:
            path = save_replay_snapshot(pit.animation_snake, generation, self.outdir)
            print(f"  → Replay: {path}")
            if self.save_animation:
                gif = save_replay_animation(pit.animation_snake, generation, self.outdir)
                print(f"  → Animation: {gif}")

        # Chart update every 100 gens
        if generation % 100 == 0:
            save_evolution_chart(pit.history, self.outdir)


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args = parse_args(argv)
    outdir = os.path.join(args.outdir, args.species)
    ensure_dirs(outdir)

    mutation_rate = 0.0 if args.no_mutation else args.mutation

    print("=" * 60)
    print("  Genetic Snake")
    print("=" * 60)
    print(f"  Species    : {args.species}")
    print(f"  Activation : {args.activation}")
    print(f"  Grid       : {args.width} x {args.height}")
    print(f"  Population : {args.pop}")
    print(f"  Generations: {args.gens}")
    print(f"  Mutation   : {mutation_rate}")
    print(f"  Workers    : {args.workers}")
    print(f"  Output dir : {outdir}")
    print("=" * 60)

    rng     = np.random.default_rng(args.seed)
    factory = SnakeFactory(args.species, args.width, args.height, args.activation, rng)
    print(factory.new_brain().summary())

    cb = PitCallbacks(
        outdir            = outdir,
        snapshot_interval = args.snapshot_interval,
        save_animation    = SAVE_ANIMATION and not args.no_animation,
    )

    pit = SnakePit(
        factory,
        population_size      = args.pop,
        mutation_probability = mutation_rate,
        rng                  = rng,
        on_generation        = cb.on_generation,
        workers              = args.workers,
    )

    pit.run(args.gens)

    # Final chart
    print("\nSaving final evolution chart …")
    chart_path = save_evolution_chart(pit.history, outdir, "evolution_final.png")
    print(f"  → {chart_path}")

    # Final replay
    if pit.animation_snake is not None:
        snap = save_replay_snapshot(pit.animation_snake, pit.generation, outdir)
        print(f"  → Final replay: {snap}")

    print("\nFinished, all snake evolution has come to an end. Outputs in:", outdir)
    return pit


if __name__ == "__main__":
    main()
