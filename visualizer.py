"""
Visualizer for Genetic Snake.

Produces:
  1. Replay snapshots  – the best snake's final position and its head's path
  2. Replay animations – the best snake's whole run as an animated GIF
  3. Evolution chart   – fitness, length and moves over generations
  4. CSV log           – one row per generation, flushed to disk every row

Replays are rebuilt from the snake's hatchling, movements and food locations
(snake.replay_frames); nothing here changes the snake.
"""

import os
import csv
import numpy as np
import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.colors import ListedColormap

from snake import replay_frames
from config import SAVE_DIR, LOG_CSV

CSV_FIELDS = ("generation", "fitness", "length", "moves")

# cell values used when rasterising a frame
EMPTY, BODY, HEAD, FOOD = 0, 1, 2, 3
CELL_COLOURS = ListedColormap(["#111111", "#2E9E44", "#7CFF7C", "#FF4444"])


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("replays", "charts"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


# ──────────────────────────────────────────────────────────────────────────────
# Replays
# ──────────────────────────────────────────────────────────────────────────────

def frame_grid(body, food, width: int, height: int) -> np.ndarray:
    """Rasterise one replay frame into a (height, width) array of cell values."""
    grid = np.full((height, width), EMPTY, dtype=np.int8)
    if food is not None:
        grid[food.y, food.x] = FOOD
    for segment in body:
        grid[segment.y, segment.x] = BODY
    head = body[-1]
    grid[head.y, head.x] = HEAD
    return grid


def _style_axes(fig, ax, width: int, height: int):
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    ax.set_xlim(-0.5, width - 0.5)
    ax.set_ylim(height - 0.5, -0.5)    # row 0 at the top
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")


def _title(snake, generation: int) -> str:
    return (f"Generation {generation}  |  fitness {snake.fitness}  |  "
            f"length {snake.length}  |  moves {len(snake.movements)}  |  "
            f"{snake.state.value}")


def save_replay_snapshot(snake, generation: int, base: str = SAVE_DIR):
    """
    Render the snake's last frame, with the path its head travelled drawn
    over the grid and every food location it was given marked.
    """
    frames = list(replay_frames(snake.hatchling, snake.movements, snake.food_locations))
    body, food = frames[-1]
    heads = np.array([[f[0][-1].x, f[0][-1].y] for f in frames])

    fig, ax = plt.subplots(figsize=(6, 6), dpi=100)
    _style_axes(fig, ax, snake.width, snake.height)
    ax.imshow(frame_grid(body, food, snake.width, snake.height),
              cmap=CELL_COLOURS, vmin=EMPTY, vmax=FOOD, interpolation="nearest")
    ax.plot(heads[:, 0], heads[:, 1], color="#CC44FF", linewidth=0.8, alpha=0.6)
    if snake.food_locations:
        ax.scatter([p.x for p in snake.food_locations], [p.y for p in snake.food_locations],
                   s=10, marker="x", color="#FF8800", linewidths=0.8, zorder=3)
    ax.set_title(_title(snake, generation), color="white", fontsize=9)

    path = os.path.join(base, "replays", f"gen_{generation:06d}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


def save_replay_animation(snake, generation: int, base: str = SAVE_DIR,
                          fps: int = 20):
    """Write the whole run as an animated GIF, one frame per move."""
    frames = list(replay_frames(snake.hatchling, snake.movements, snake.food_locations))

    fig, ax = plt.subplots(figsize=(5, 5), dpi=80)
    _style_axes(fig, ax, snake.width, snake.height)
    image = ax.imshow(frame_grid(*frames[0], snake.width, snake.height),
                      cmap=CELL_COLOURS, vmin=EMPTY, vmax=FOOD, interpolation="nearest")
    ax.set_title(_title(snake, generation), color="white", fontsize=8)

    def _update(i):
        image.set_data(frame_grid(*frames[i], snake.width, snake.height))
        return (image,)

    animation = FuncAnimation(fig, _update, frames=len(frames), blit=True)
    path = os.path.join(base, "replays", f"gen_{generation:06d}.gif")
    animation.save(path, writer=PillowWriter(fps=fps))
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Evolution statistics chart
# ──────────────────────────────────────────────────────────────────────────────

def save_evolution_chart(history: list, base: str = SAVE_DIR,
                         filename: str = "evolution.png"):
    """
    Plot the best snake's fitness (left axis) with its length and moves
    (right axis) across all generations.
    """
    if not history:
        return
    gens    = [r["generation"] for r in history]
    fitness = [r["fitness"]    for r in history]
    length  = [r["length"]     for r in history]
    moves   = [r["moves"]      for r in history]

    fig, ax1 = plt.subplots(figsize=(12, 5), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax1.set_facecolor("#111111")

    ax1.plot(gens, fitness, color="#44FF44", linewidth=1.2,
             label="Fitness", zorder=3)
    ax1.set_ylabel("Fitness", color="white")
    ax1.tick_params(axis="both", colors="white")
    ax1.set_xlabel("Generation", color="white")

    ax2 = ax1.twinx()
    ax2.plot(gens, length, color="#CC44FF", linewidth=1.0,
             linestyle="--", label="Length", zorder=2)
    ax2.plot(gens, moves, color="#FF8800", linewidth=1.0,
             alpha=0.8, label="Moves", zorder=2)
    ax2.set_ylabel("Length / moves", color="white")
    ax2.tick_params(colors="white")

    for spine in ax1.spines.values():
        spine.set_edgecolor("#444444")

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2,
               facecolor="#222222", labelcolor="white",
               loc="upper left", fontsize=8)

    ax1.set_title("Evolutionary Progress", color="white", fontsize=12)
    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(record: dict, base: str = SAVE_DIR, filename: str = "evolution_log.csv"):
    """
    Append one generation's progress record, then flush and fsync so the row
    is on disk before the next generation starts.
    """
    if not LOG_CSV:
        return
    path = os.path.join(base, filename)
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        if not file_exists:
            writer.writerow({field: field.capitalize() for field in CSV_FIELDS})
        writer.writerow(record)
        f.flush()
        os.fsync(f.fileno())
    return path
