import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.collections import LineCollection

from tspcolony.antcolony import AntColony, ColonyParams
from tspcolony.pheromoneAnimation import animate_colony, info_lines, plot_map, road_colors, road_shades


def test_shades_are_zero_without_pheromone(triangle_map):
    assert road_shades(triangle_map).tolist() == [0, 0, 0]


def test_shades(triangle_map):
    # road lengths 3, 4, 5 out of 12
    for road, p in zip(triangle_map.roads, [6.0, 2.0, 0.0]):
        road.pheromone = p
    triangle_map.total_pheromones = 8.0

    shades = road_shades(triangle_map)

    expected = np.clip(((np.array([6, 2, 0]) / 8) / (np.array([3, 4, 5]) / 12) - .5) * .9, 0, .9)
    assert shades == pytest.approx(expected)
    assert shades[0] == pytest.approx(.9)
    assert shades[2] == 0


def test_colors_fade_from_grey_to_green():
    colors = road_colors(np.array([0.0, .9]))

    assert colors[0] == pytest.approx([.9, .9, .9])
    assert colors[1] == pytest.approx([0, .9, 0])


def test_plot_map(triangle_map):
    colony = AntColony(triangle_map, ColonyParams(half_life=2, random_probability=0), seed=0)
    colony.run(5)

    ax = plot_map(colony)

    lines = [c for c in ax.collections if isinstance(c, LineCollection)]
    assert len(lines) == 1
    widths = lines[0].get_linewidths()
    assert sorted(widths) == [5.0, 5.0, 5.0]

    texts = [t.get_text() for t in ax.texts]
    assert any(t.startswith("Nodes = 3, edges = 3") for t in texts)
    assert any(t.endswith("%") for t in texts)
    assert [a.get_text() for a in ax.texts if a.get_text() in ("A", "B", "C")] == ["A", "B", "C"]
    plt.close("all")


def test_info_lines(two_city_map):
    colony = AntColony(two_city_map, seed=0)
    assert info_lines(two_city_map, colony.snapshot())[-1] == "Min distance = -1.00 (0)"

    colony.run(3)
    lines = info_lines(two_city_map, colony.snapshot())

    assert lines == [
        "Nodes = 2, edges = 1",
        "Iterations = 3 (0)",
        "Pheromones = 0",
        "Min distance = 100.00 (1)",
    ]


def test_animation_to_gif(triangle_map, tmp_path):
    colony = AntColony(triangle_map, ColonyParams(half_life=3), seed=0)
    gif = tmp_path / "ants.gif"

    animate_colony(colony, frames=2, iterations_per_frame=4, interval=100, gif_path=str(gif), show=False)

    assert gif.exists()
    assert colony.iterations == 8
    plt.close("all")


def test_animation_stops_at_max_iterations(triangle_map, tmp_path):
    colony = AntColony(triangle_map, ColonyParams(max_iterations=10), seed=0)

    animate_colony(colony, frames=3, iterations_per_frame=4, interval=100, gif_path=str(tmp_path / "a.gif"), show=False)
    assert colony.iterations == 10

    # replaying the frames runs nothing more
    animate_colony(colony, frames=3, iterations_per_frame=4, interval=100, gif_path=str(tmp_path / "b.gif"), show=False)
    assert colony.iterations == 10
    plt.close("all")
