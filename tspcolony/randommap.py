import numpy as np
import networkx as nx

from .maplogic import CityMap, city_distance, City


def random_city_map(
    rng=None,
    min_cities=25,
    extra_cities=10,
    width=1200,
    height=800,
    margin=25,
    min_city_distance=50,
    road_probability=.1,
    connect_distance=400,
    connect_all=False,
    max_tries=10000
) -> CityMap:
    """
    Scatter cities over a width x height canvas and connect them with roads.

    Parameters
    ----------
    rng : numpy.random.Generator or int or None
        Random source, an int is used as seed
    min_cities, extra_cities : int
        Number of cities is min_cities + a random part below extra_cities
    min_city_distance : float
        Cities are resampled until they are at least this far from the others
    road_probability : float
        Chance of a road between any two cities
    connect_distance : float
        Cities closer than this are always connected
    connect_all : bool
        Build a complete graph
    """
    rng = np.random.default_rng(rng)
    city_map = CityMap()

    n_cities = int(rng.random() * extra_cities) + min_cities

    for i in range(n_cities):
        for _ in range(max_tries):
            x = int(rng.random() * (width - 2 * margin)) + margin
            y = int(rng.random() * (height - 2 * margin)) + margin
            candidate = City(x, y, format(i, "X"))

            if all(city_distance(candidate, other) >= min_city_distance for other in city_map.cities):
                break
        else:
            raise RuntimeError(f"Could not place city {i} at least {min_city_distance} from the others")

        city_map.add_city(x, y, candidate.name)

    for i in range(n_cities):
        for j in range(i + 1, n_cities):
            a, b = city_map.cities[i], city_map.cities[j]

            if connect_all or rng.random() < road_probability or city_distance(a, b) < connect_distance:
                city_map.connect_cities(i, j)

    return city_map


def erdos_renyi_city_map(n, p, rng=None, width=1200, height=800) -> CityMap:
    """Random G(n, p) graph with cities placed uniformly on the canvas."""
    rng = np.random.default_rng(rng)

    G = nx.erdos_renyi_graph(n, p, seed=int(rng.integers(2**31)))

    for u in G.nodes:
        G.nodes[u]["x"] = float(rng.uniform(0, width))
        G.nodes[u]["y"] = float(rng.uniform(0, height))
        G.nodes[u]["name"] = format(u, "X")

    return CityMap.from_networkx(G)
