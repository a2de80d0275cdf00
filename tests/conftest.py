import matplotlib

matplotlib.use("Agg")

import pytest

from tspcolony.antcolony import ColonyParams
from tspcolony.maplogic import CityMap


class FixedRng:
    """Stands in for numpy.random.Generator with scripted draws."""

    def __init__(self, values, start=0):
        self.values = list(values)
        self.start = start

    def random(self):
        return self.values.pop(0)

    def integers(self, n):
        return self.start


@pytest.fixture
def quiet_params():
    return ColonyParams(random_probability=0.0)


@pytest.fixture
def two_city_map():
    city_map = CityMap()
    a = city_map.add_city(0, 0, "A")
    b = city_map.add_city(30, 40, "B")
    city_map.connect_cities(a, b)
    return city_map


@pytest.fixture
def triangle_map():
    # 3-4-5 triangle, roads AB=3, AC=4, BC=5, average 4
    city_map = CityMap()
    a = city_map.add_city(0, 0, "A")
    b = city_map.add_city(3, 0, "B")
    c = city_map.add_city(0, 4, "C")
    city_map.connect_cities(a, b)
    city_map.connect_cities(a, c)
    city_map.connect_cities(b, c)
    return city_map


@pytest.fixture
def isolated_city_map():
    city_map = CityMap()
    a = city_map.add_city(0, 0, "A")
    b = city_map.add_city(10, 0, "B")
    city_map.add_city(50, 50, "C")
    city_map.connect_cities(a, b)
    return city_map


@pytest.fixture
def fixed_rng():
    return FixedRng
