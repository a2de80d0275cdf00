import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Set

import numpy as np

from .maplogic import CityMap

logger = logging.getLogger(__name__)


@dataclass
class Tour:
    """State of one ant walk. Discarded after pheromones and the incumbent are updated."""
    start: int
    current: int
    roads: List[int] = field(default_factory=list)
    road_set: Set[int] = field(default_factory=set)
    visited: Set[int] = field(default_factory=set)
    distance: float = 0.0
    moves: int = 0
    abandoned: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.abandoned is None

    @property
    def last_road(self) -> Optional[int]:
        return self.roads[-1] if self.roads else None


def rate_road(city_map: CityMap, road_idx: int, current: int, tour: Tour, avg_distance: float, params, rng) -> float:
    """
    Attractiveness of taking road_idx out of current. Higher is better.
    """
    road = city_map.roads[road_idx]
    opposite = road.opposite(current)
    relative_length = road.distance / avg_distance

    # long roads are penalised, sqrt keeps it mild (usually -0.5 .. -2)
    rating = params.distance_factor * math.sqrt(relative_length)

    # pheromone share scaled by the number of cities, ~1 for the roads of the best tour
    if city_map.total_pheromones > 0:
        share = road.pheromone / city_map.total_pheromones
        rating += params.pheromone_factor * share * len(city_map.cities) / relative_length

    if opposite in tour.visited:
        rating += params.visited_penalty

    if road_idx in tour.road_set:
        rating += params.visited_road_penalty
        if road_idx == tour.last_road:
            rating += params.return_same_penalty

    if rng.random() < params.random_probability:
        rating += params.random_magnitude * (rng.random() - .5)

    return rating


def select_road(city_map: CityMap, current: int, tour: Tour, avg_distance: float, params, rng) -> Optional[int]:
    """
    Best rated road out of current, first one wins on equal ratings.
    None when the city has no roads.
    """
    selected = None
    max_rating = None

    for road_idx in city_map.cities[current].roads:
        rating = rate_road(city_map, road_idx, current, tour, avg_distance, params, rng)

        if max_rating is None or rating > max_rating:
            selected = road_idx
            max_rating = rating

    return selected


def build_tour(city_map: CityMap, params, rng, avg_distance: Optional[float] = None, start: Optional[int] = None) -> Tour:
    """
    Walk one ant from a random city until every city is visited and it is back at the
    start, or until the move budget (cities * moves_factor) runs out.
    The start city only counts as visited once the ant comes back to it.
    """
    n = len(city_map.cities)
    if avg_distance is None:
        avg_distance = city_map.average_road_distance()
    if start is None:
        start = int(rng.integers(n))

    tour = Tour(start=start, current=start)
    max_moves = n * params.moves_factor

    while len(tour.visited) < n or tour.current != tour.start:
        if tour.moves >= max_moves:
            tour.abandoned = "move budget exhausted"
            break

        road_idx = select_road(city_map, tour.current, tour, avg_distance, params, rng)
        if road_idx is None:
            tour.abandoned = "dead end"
            break

        road = city_map.roads[road_idx]
        tour.moves += 1
        tour.roads.append(road_idx)
        tour.road_set.add(road_idx)
        tour.distance += road.distance

        tour.current = road.opposite(tour.current)
        tour.visited.add(tour.current)

    return tour


def deposit_pheromones(city_map: CityMap, tour: Tour, best_distance: Optional[float], params) -> float:
    """
    Put pheromone of a finished tour into the pending pool of its roads.
    Returns the amount deposited.
    """
    n = len(city_map.cities)

    available = float(n)

    # extra moves spread the pheromone thin
    if tour.moves > n:
        available /= tour.moves - n

    # new best tour gets a share of everything already on the map
    if best_distance is None or tour.distance < best_distance:
        available += (city_map.total_pheromones + city_map.total_pheromones_pending) * params.best_distance_factor

    # a shorter loop would be walked more often in the same time, so it leaves more per unit
    per_unit = available / tour.distance

    for road_idx in tour.roads:
        road = city_map.roads[road_idx]
        road.pheromone_pending += per_unit * road.distance

    city_map.total_pheromones_pending += available

    return available


def decay_pheromones(city_map: CityMap):
    """Halve active pheromone, activate the pending deposits and recompute the totals."""
    pheromone = np.empty(len(city_map.roads), dtype=np.float64)

    for i, road in enumerate(city_map.roads):
        road.pheromone = road.pheromone / 2 + road.pheromone_pending
        road.pheromone_pending = 0.0
        pheromone[i] = road.pheromone

    city_map.total_pheromones = float(pheromone.sum())
    city_map.total_pheromones_pending = 0.0

    logger.debug("pheromone decay, total = %.2f", city_map.total_pheromones)

    return
