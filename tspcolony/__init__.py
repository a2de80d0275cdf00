"""Ant colony search for short closed tours over a map of cities and roads."""
from .antcolony import AntColony, ColonyParams, ColonySnapshot, Incumbent
from .ants import Tour, build_tour, decay_pheromones, deposit_pheromones, rate_road, select_road
from .maplogic import City, CityMap, MalformedMapError, Road
from .randommap import erdos_renyi_city_map, random_city_map

__all__ = [
    "AntColony", "ColonyParams", "ColonySnapshot", "Incumbent",
    "Tour", "build_tour", "decay_pheromones", "deposit_pheromones", "rate_road", "select_road",
    "City", "CityMap", "MalformedMapError", "Road",
    "erdos_renyi_city_map", "random_city_map",
]
