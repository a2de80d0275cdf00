import logging
import time
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional

import numpy as np
from tqdm import tqdm

from .ants import Tour, build_tour, decay_pheromones, deposit_pheromones
from .maplogic import CityMap

logger = logging.getLogger(__name__)


@dataclass
class ColonyParams:
    max_iterations: int = 100000
    half_life: int = 1000           # iterations between pheromone decay passes
    moves_factor: int = 8           # move budget = cities * moves_factor

    distance_factor: float = -1.0   # weight of sqrt(relative road length)
    pheromone_factor: float = 1.0   # weight of the pheromone share
    visited_penalty: float = -2.0   # far city already visited
    visited_road_penalty: float = -1.0
    return_same_penalty: float = -1.0

    random_probability: float = 0.01
    random_magnitude: float = 100.0

    best_distance_factor: float = 0.66   # bonus for a new best tour, share of all pheromone on the map

    sleep_time: float = 0.0

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.half_life < 1:
            raise ValueError("half_life must be >= 1")
        if self.moves_factor < 1:
            raise ValueError("moves_factor must be >= 1")
        if not 0 <= self.random_probability <= 1:
            raise ValueError("random_probability must be in [0, 1]")
        if self.sleep_time < 0:
            raise ValueError("sleep_time must be >= 0")


@dataclass(frozen=True)
class Incumbent:
    distance: float
    roads: FrozenSet[int]
    iteration: int


@dataclass(frozen=True, eq=False)
class ColonySnapshot:
    """Copy of the colony state handed to the renderer between iterations."""
    iterations: int
    ignored: int
    best_distance: Optional[float]
    best_iteration: int
    best_roads: FrozenSet[int]
    total_pheromones: float
    total_pheromones_pending: float
    pheromone: np.ndarray


class AntColony:
    """
    One ant per iteration over a shared CityMap.

    Each iteration: decay every half_life iterations, walk one ant, and on a
    completed tour deposit pheromone and update the incumbent. Abandoned walks
    only count towards `ignored`.
    """

    def __init__(self, city_map: CityMap, params: Optional[ColonyParams] = None, seed=None):
        city_map.validate()

        self.map = city_map
        self.p = params or ColonyParams()
        self.rng = np.random.default_rng(seed)

        # road lengths never change
        self.avg_distance = city_map.average_road_distance()

        self.iterations = 0
        self.ignored = 0
        self.incumbent: Optional[Incumbent] = None

        if not city_map.is_connected():
            logger.warning("map is not connected, every iteration will be ignored")

    @property
    def best_distance(self) -> Optional[float]:
        return self.incumbent.distance if self.incumbent else None

    def offer(self, tour: Tour) -> bool:
        """Make tour the incumbent if it is strictly shorter. Returns True on replacement."""
        if self.incumbent is not None and not tour.distance < self.incumbent.distance:
            return False

        self.incumbent = Incumbent(tour.distance, frozenset(tour.road_set), self.iterations)
        logger.info("new best distance %.2f at iteration %d", tour.distance, self.iterations)

        return True

    def run_one_iteration(self) -> Tour:
        self.iterations += 1

        if self.iterations % self.p.half_life == 0:
            decay_pheromones(self.map)

        tour = build_tour(self.map, self.p, self.rng, avg_distance=self.avg_distance)

        if not tour.completed:
            self.ignored += 1
            logger.debug("iteration #%d ignored (%s)", self.iterations, tour.abandoned)
            return tour

        deposited = deposit_pheromones(self.map, tour, self.best_distance, self.p)
        self.offer(tour)

        logger.debug(
            "finished iteration #%d, moves = %d, distance = %.2f, pheromones = %.2f",
            self.iterations, tour.moves, tour.distance, deposited
        )

        return tour

    def run(self, iterations: Optional[int] = None, progress: bool = False,
            callback: Optional[Callable[["AntColony"], None]] = None) -> ColonySnapshot:
        """
        Run until max_iterations in total, or for the given number of extra iterations.
        """
        if iterations is None:
            iterations = max(self.p.max_iterations - self.iterations, 0)

        steps = range(iterations)
        if progress:
            steps = tqdm(steps, desc="ants", unit="it")

        for _ in steps:
            if self.p.sleep_time > 0:
                time.sleep(self.p.sleep_time)

            self.run_one_iteration()

            if callback is not None:
                callback(self)

        return self.snapshot()

    def snapshot(self) -> ColonySnapshot:
        best = self.incumbent

        return ColonySnapshot(
            iterations=self.iterations,
            ignored=self.ignored,
            best_distance=best.distance if best else None,
            best_iteration=best.iteration if best else 0,
            best_roads=best.roads if best else frozenset(),
            total_pheromones=self.map.total_pheromones,
            total_pheromones_pending=self.map.total_pheromones_pending,
            pheromone=self.map.pheromone_levels(),
        )
