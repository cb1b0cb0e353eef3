"""
Quick demo – evolves forward-only snakes on a small grid for 60 generations
and saves replays + charts without needing a display.
"""
import os

import numpy as np

from snake_factory import SnakeFactory
from snake_pit import SnakePit
from visualizer import (ensure_dirs, save_replay_snapshot, save_replay_animation,
                        save_evolution_chart, append_csv)

OUT = "output/demo"


def on_gen(record, pit):
    append_csv(record, OUT)
    if record["generation"] % 20 == 0:
        print(f"  Saving replay gen {record['generation']}...")
        save_replay_snapshot(pit.animation_snake, record["generation"], OUT)
        save_replay_animation(pit.animation_snake, record["generation"], OUT)


def main():
    ensure_dirs(OUT)
    rng = np.random.default_rng(42)
    factory = SnakeFactory("forward_only", 20, 20, "relu", rng)
    pit = SnakePit(
        factory,
        population_size      = 300,
        mutation_probability = 0.05,
        rng                  = rng,
        on_generation        = on_gen,
    )
    pit.run(60)
    save_evolution_chart(pit.history, OUT, "demo_chart.png")

    print("\nAll outputs in:", OUT)
    print("Files:")
    for root, dirs, files in os.walk(OUT):
        for f in files:
            print(f"  {os.path.join(root, f)}")


if __name__ == "__main__":
    main()
