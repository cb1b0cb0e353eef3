"""
Population engine for Genetic Snake.

Each generation:
  1. spawn()   – random snakes for the first generation; afterwards the elite
                 clone plus crossover children of (elite, random mate)
  2. survive() – run every snake, rank by fitness, keep the elite and the
                 mating pool, report the best snake
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
from errors import ConfigurationError, InvariantViolation
from genome import crossover
from config import POPULATION, MUTATION_RATE, MATING_PERCENT, WORKERS


class SnakePit:
    """
    Owns the population for the whole run; the snakes themselves are
    replaced every generation.
    """

    def __init__(
        self,
        factory,
        population_size:      int   = POPULATION,
        mutation_probability: float = MUTATION_RATE,
        rng                         = None,
        on_generation               = None,    # called with (record, pit) after survive()
        workers:              int   = WORKERS,
        verbose:              bool  = True,
    ):
        # the top snake plus at least one mate
        if population_size < 2:
            raise ConfigurationError(f"Population size must be at least 2, got {population_size}")
        if not 0.0 <= mutation_probability <= 1.0:
            raise ConfigurationError(
                f"Mutation probability must be within [0, 1], got {mutation_probability}")
        if workers < 1:
            raise ConfigurationError(f"Workers must be at least 1, got {workers}")

        self.factory              = factory
        self.population_size      = population_size
        self.mutation_probability = mutation_probability
        self.mutation_threshold   = 1.0 - mutation_probability
        self.rng                  = rng if rng is not None else np.random.default_rng()
        self.on_generation        = on_generation
        self.workers              = workers
        self.verbose              = verbose

        self.snakes          = []
        self.best_snake      = None    # fresh clone of the top snake's brain
        self.animation_snake = None    # the evaluated top snake, for replay
        self.mating_pool     = []
        self.high_score      = 0
        self.generation      = 0
        self.history         = []      # one progress record per generation

    @property
    def mating_pool_size(self) -> int:
        return max(1, self.population_size * MATING_PERCENT // 100)

    # ──────────────────────────────────────────────────────────────────────────
    # Breeding
    # ──────────────────────────────────────────────────────────────────────────

    def spawn(self) -> list:
        """Fill the pit with the next generation of snakes."""
        if self.generation == 0:
            self.snakes = [self.factory.create(rng=self.rng)
                           for _ in range(self.population_size)]
        else:
            if self.best_snake is None or not self.mating_pool:
                raise InvariantViolation(
                    f"Unable to spawn generation #{self.generation} without parents")

            snakes = [self.best_snake]
            mother = self.best_snake.brain.get_state()
            while len(snakes) < self.population_size:
                mate = self.mating_pool[int(self.rng.integers(len(self.mating_pool)))]
                daughter, son = crossover(mother, mate.brain.get_state(),
                                          self.mutation_threshold, self.rng)
                snakes.append(self.factory.create(daughter, rng=self.rng))
                if len(snakes) < self.population_size:
                    snakes.append(self.factory.create(son, rng=self.rng))
            self.snakes = snakes

        self.generation += 1
        return self.snakes

    # ──────────────────────────────────────────────────────────────────────────
    # Selection
    # ──────────────────────────────────────────────────────────────────────────

    def survive(self) -> dict:
        """
        Run every snake to the end of its life, then rank them.

        Returns:
            progress record {generation, fitness, length, moves} of the best snake
        """
        if not self.snakes:
            raise InvariantViolation("spawn() must be called before survive()")

        if self.workers > 1:
            # one child stream per snake, spawned in population order
            streams = self.rng.spawn(len(self.snakes))
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                list(executor.map(lambda s, r: s.survive(r), self.snakes, streams))
        else:
            for snake in self.snakes:
                snake.survive()

        # sort is stable, equal fitness keeps spawn order
        self.snakes.sort(key=lambda s: s.fitness, reverse=True)

        top = self.snakes[0]
        self.best_snake      = self.factory.create(top.brain.get_state(), rng=self.rng)
        self.animation_snake = top
        self.mating_pool     = self.snakes[1:1 + self.mating_pool_size]

        record = {
            "generation": self.generation,
            "fitness":    top.fitness,
            "length":     top.length,
            "moves":      len(top.movements),
        }
        self.history.append(record)

        delta = self._update_high_score(top.fitness)
        if self.verbose:
            sign = "+" if delta > 0 else ""
            print(f"Best snake in generation #{record['generation']}, "
                  f"length: {record['length']}, moves: {record['moves']}, "
                  f"score: {record['fitness']} [{sign}{delta}%, {self.high_score}]")

        if self.on_generation:
            self.on_generation(record, self)
        return record

    def _update_high_score(self, fitness: int) -> int:
        """Percentage change of `fitness` against the high score before this generation."""
        if self.high_score == 0:
            self.high_score = fitness
        delta = (int(np.floor(100.0 * (fitness - self.high_score) / abs(self.high_score) + 0.5))
                 if self.high_score else 0)
        if fitness > self.high_score:
            self.high_score = fitness
        return delta

    # ──────────────────────────────────────────────────────────────────────────

    def run(self, max_generations: int, should_stop=None) -> list:
        """
        spawn/survive until `max_generations` generations have run, or until
        should_stop() returns True between generations.
        """
        while self.generation < max_generations:
            if should_stop is not None and should_stop():
                break
            self.spawn()
            self.survive()
        return self.history
