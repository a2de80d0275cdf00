import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import networkx as nx


class MalformedMapError(ValueError):
    """The map can not be used by the colony (bad references, empty, degenerate distances)."""


@dataclass(frozen=True, eq=False)
class City:
    x: float
    y: float
    name: str
    roads: List[int] = field(default_factory=list)   # indices into CityMap.roads


@dataclass(eq=False)
class Road:
    a: int
    b: int
    distance: float

    pheromone: float = 0.0           # active, read by the ants
    pheromone_pending: float = 0.0   # deposited since the last decay pass

    def opposite(self, city: int) -> int:
        return self.b if city == self.a else self.a


def city_distance(a: City, b: City) -> float:
    return float(np.hypot(a.x - b.x, a.y - b.y))


class CityMap:
    """
    Cities and roads stored as two arenas addressed by index.
    A city's adjacency list holds road indices, a road holds city indices.
    """

    def __init__(self):
        self.cities: List[City] = []
        self.roads: List[Road] = []

        self.total_pheromones = 0.0
        self.total_pheromones_pending = 0.0

    def add_city(self, x: float, y: float, name: Optional[str] = None) -> int:
        if name is None:
            name = format(len(self.cities), "X")

        self.cities.append(City(float(x), float(y), name))
        return len(self.cities) - 1

    def connect_cities(self, a: int, b: int) -> int:
        n = len(self.cities)
        if not (0 <= a < n and 0 <= b < n):
            raise MalformedMapError(f"road ({a}, {b}) references a city outside the map")
        if a == b:
            raise MalformedMapError(f"road ({a}, {b}) connects a city to itself")

        road = Road(a, b, city_distance(self.cities[a], self.cities[b]))
        self.roads.append(road)

        idx = len(self.roads) - 1
        self.cities[a].roads.append(idx)
        self.cities[b].roads.append(idx)

        return idx

    def sum_road_distances(self) -> float:
        return float(sum(r.distance for r in self.roads))

    def average_road_distance(self) -> float:
        if not self.roads:
            raise MalformedMapError("map has no roads")

        return self.sum_road_distances() / len(self.roads)

    def pheromone_levels(self) -> np.ndarray:
        return np.array([r.pheromone for r in self.roads], dtype=np.float64)

    def validate(self):
        """
        Check the preconditions of the colony and raise MalformedMapError on the first violation.
        Connectivity is not checked here, see is_connected().
        """
        if not self.cities:
            raise MalformedMapError("map has no cities")
        if not self.roads:
            raise MalformedMapError("map has no roads")

        n = len(self.cities)
        for idx, road in enumerate(self.roads):
            if not (0 <= road.a < n and 0 <= road.b < n):
                raise MalformedMapError(f"road {idx} references a city outside the map")
            if road.a == road.b:
                raise MalformedMapError(f"road {idx} connects city {road.a} to itself")
            if not road.distance > 0 or not math.isfinite(road.distance):
                raise MalformedMapError(f"road {idx} has invalid length {road.distance}")
            if road.pheromone < 0 or road.pheromone_pending < 0:
                raise MalformedMapError(f"road {idx} has negative pheromone")
            if idx not in self.cities[road.a].roads or idx not in self.cities[road.b].roads:
                raise MalformedMapError(f"road {idx} is missing from its cities' adjacency lists")

        for i, city in enumerate(self.cities):
            for idx in city.roads:
                if not 0 <= idx < len(self.roads):
                    raise MalformedMapError(f"city {city.name} lists unknown road {idx}")
                if i not in (self.roads[idx].a, self.roads[idx].b):
                    raise MalformedMapError(f"city {city.name} lists road {idx} which does not touch it")

        if not self.average_road_distance() > 0:
            raise MalformedMapError("average road distance is zero")

        return

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()

        for i, city in enumerate(self.cities):
            G.add_node(i, x=city.x, y=city.y, name=city.name)

        for idx, road in enumerate(self.roads):
            G.add_edge(road.a, road.b, road=idx, length=road.distance, pheromone=road.pheromone)

        return G

    def is_connected(self) -> bool:
        if not self.cities:
            return False

        return nx.is_connected(self.to_networkx())

    @classmethod
    def from_networkx(cls, G: nx.Graph) -> "CityMap":
        """
        Build a map from a networkx graph whose nodes carry "x" and "y"
        attributes. Node names default to the node label.
        Directed and multi graphs are collapsed to one road per city pair.
        """
        if G.is_directed() or G.is_multigraph():
            G = nx.Graph(G)

        city_map = cls()
        index = {}

        for u, data in G.nodes(data=True):
            if "x" not in data or "y" not in data:
                raise MalformedMapError(f"node {u} has no position")
            index[u] = city_map.add_city(data["x"], data["y"], str(data.get("name", u)))

        for u, v in G.edges():
            city_map.connect_cities(index[u], index[v])

        return city_map
