import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.collections import LineCollection
from matplotlib.animation import PillowWriter

from .antcolony import AntColony, ColonySnapshot
from .maplogic import CityMap


def road_shades(city_map: CityMap, snapshot: ColonySnapshot = None) -> np.ndarray:
    """
    Per road intensity in [0, .9]: how much more pheromone the road holds than its
    share of the total road length would give it.
    """
    distance = np.array([r.distance for r in city_map.roads], dtype=np.float64)

    if snapshot is None:
        pheromone, total = city_map.pheromone_levels(), city_map.total_pheromones
    else:
        pheromone, total = snapshot.pheromone, snapshot.total_pheromones

    if total <= 0:
        return np.zeros(len(distance))

    shade = ((pheromone / total) / (distance / distance.sum()) - .5) * .9

    return np.clip(shade, 0, .9)


def road_colors(shades: np.ndarray) -> np.ndarray:
    colors = np.empty((len(shades), 3))
    colors[:, 0] = .9 - shades
    colors[:, 1] = .9
    colors[:, 2] = .9 - shades

    return colors


def road_segments(city_map: CityMap) -> np.ndarray:
    segments = []

    for road in city_map.roads:
        a, b = city_map.cities[road.a], city_map.cities[road.b]
        segments.append([(a.x, a.y), (b.x, b.y)])

    return np.asarray(segments).reshape(-1, 2, 2)


def info_lines(city_map: CityMap, snapshot: ColonySnapshot):
    best = snapshot.best_distance if snapshot.best_distance is not None else -1

    return [
        f"Nodes = {len(city_map.cities)}, edges = {len(city_map.roads)}",
        f"Iterations = {snapshot.iterations} ({snapshot.ignored})",
        f"Pheromones = {snapshot.total_pheromones:.0f}",
        f"Min distance = {best:.2f} ({snapshot.best_iteration})",
    ]


def plot_map(colony: AntColony, ax=None, snapshot: ColonySnapshot = None):
    """
    Draw the map: roads coloured by pheromone, the incumbent tour in bold,
    pheromone percentages on the important roads and the colony statistics.
    """
    city_map = colony.map
    if snapshot is None:
        snapshot = colony.snapshot()

    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 8))

    ax.clear()
    ax.set_facecolor("white")
    ax.set_axis_off()

    shades = road_shades(city_map, snapshot)
    best = np.array([i in snapshot.best_roads for i in range(len(city_map.roads))], dtype=bool)

    lc = LineCollection(
        road_segments(city_map),
        colors=road_colors(shades),
        linewidths=np.where(best, 5.0, 1.0),
        zorder=1
    )
    ax.add_collection(lc)

    for i, road in enumerate(city_map.roads):
        if shades[i] > .6 or best[i]:
            a, b = city_map.cities[road.a], city_map.cities[road.b]
            share = 100 * snapshot.pheromone[i] / snapshot.total_pheromones if snapshot.total_pheromones > 0 else 0.0
            ax.text(
                (a.x + b.x) / 2,
                (a.y + b.y) / 2,
                f"{share:.1f}%",
                fontsize=7,
                family="monospace",
                ha="center",
                zorder=3
            )

    xs = [c.x for c in city_map.cities]
    ys = [c.y for c in city_map.cities]
    ax.scatter(xs, ys, c="red", marker="s", s=30, zorder=4)

    for city in city_map.cities:
        ax.annotate(city.name, (city.x, city.y), xytext=(6, -12), textcoords="offset points", family="monospace", zorder=5)

    ax.text(
        0.01,
        0.01,
        "\n".join(info_lines(city_map, snapshot)),
        transform=ax.transAxes,
        family="monospace",
        fontsize=9,
        va="bottom"
    )

    ax.autoscale()
    # screen coordinates, y grows downwards
    if not ax.yaxis_inverted():
        ax.invert_yaxis()

    return ax


def animate_colony(colony: AntColony, frames=100, iterations_per_frame=100, interval=50, gif_path=None, show=True):
    """
    Run the colony between frames and redraw after each batch of iterations.

    Parameters
    ----------
    frames : int
        Number of redraws
    iterations_per_frame : int
        Iterations run before each redraw
    interval : int
        Delay between frames in ms
    gif_path : str or None
        Save the animation as a GIF instead of only showing it
    """
    fig, ax = plt.subplots(figsize=(12, 8))
    plot_map(colony, ax)

    def init():
        return ()

    def update(frame):
        # save() and show() both replay the frames, never run past the cap
        colony.run(min(iterations_per_frame, max(colony.p.max_iterations - colony.iterations, 0)))
        plot_map(colony, ax)
        ax.set_title(f"iteration = {colony.iterations}")

        return ()

    ani = animation.FuncAnimation(
        fig,
        update,
        frames=frames,
        init_func=init,
        interval=interval,
        blit=False,
        repeat=False
    )

    if gif_path:
        writer = PillowWriter(
            fps=max(1, 1000 // interval),
            metadata={"artist": "Ant Colony Optimization"}
        )
        ani.save(gif_path, writer=writer)

    if show:
        plt.show()

    return ani
