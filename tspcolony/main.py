import argparse
import logging

import matplotlib.pyplot as plt

from .antcolony import AntColony, ColonyParams
from .pheromoneAnimation import animate_colony, plot_map
from .randommap import random_city_map


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tsp-colony",
        description="Ant colony search for short closed tours over a random map of cities and roads.",
    )

    run = p.add_argument_group("Run")
    run.add_argument("--iterations", type=int, default=100000, help="Number of ants (one per iteration)")
    run.add_argument("--half-life", type=int, default=1000, help="Iterations between pheromone decay passes")
    run.add_argument("--moves-factor", type=int, default=8, help="Move budget per ant = cities * factor")
    run.add_argument("--sleep", type=float, default=0.0, help="Delay between iterations in seconds")
    run.add_argument("--seed", type=int, default=None, help="Seed for the ants")

    rating = p.add_argument_group("Road rating")
    rating.add_argument("--distance-factor", type=float, default=-1.0)
    rating.add_argument("--pheromone-factor", type=float, default=1.0)
    rating.add_argument("--visited-penalty", type=float, default=-2.0)
    rating.add_argument("--visited-road-penalty", type=float, default=-1.0)
    rating.add_argument("--return-same-penalty", type=float, default=-1.0)
    rating.add_argument("--random-probability", type=float, default=0.01)
    rating.add_argument("--random-magnitude", type=float, default=100.0)
    rating.add_argument("--best-distance-factor", type=float, default=0.66, help="Bonus share for a new best tour")

    rnd = p.add_argument_group("Random map")
    rnd.add_argument("--map-seed", type=int, default=1, help="Seed for the map generator")
    rnd.add_argument("--min-cities", type=int, default=25)
    rnd.add_argument("--extra-cities", type=int, default=10)
    rnd.add_argument("--min-city-distance", type=float, default=50)
    rnd.add_argument("--road-probability", type=float, default=0.1)
    rnd.add_argument("--connect-distance", type=float, default=400)
    rnd.add_argument("--connect-all", action="store_true", help="Connect every pair of cities")

    out = p.add_argument_group("Output")
    out.add_argument("--plot", action="store_true", help="Show the map with the best tour at the end")
    out.add_argument("--animate", action="store_true", help="Show the colony live")
    out.add_argument("--gif", type=str, default=None, help="Save the animation to a GIF")
    out.add_argument("--progress", action="store_true", help="Show a progress bar")
    out.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    return p


def params_from_args(args) -> ColonyParams:
    return ColonyParams(
        max_iterations=args.iterations,
        half_life=args.half_life,
        moves_factor=args.moves_factor,
        distance_factor=args.distance_factor,
        pheromone_factor=args.pheromone_factor,
        visited_penalty=args.visited_penalty,
        visited_road_penalty=args.visited_road_penalty,
        return_same_penalty=args.return_same_penalty,
        random_probability=args.random_probability,
        random_magnitude=args.random_magnitude,
        best_distance_factor=args.best_distance_factor,
        sleep_time=args.sleep,
    )


def main(argv=None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        params = params_from_args(args)
        city_map = random_city_map(
            args.map_seed,
            min_cities=args.min_cities,
            extra_cities=args.extra_cities,
            min_city_distance=args.min_city_distance,
            road_probability=args.road_probability,
            connect_distance=args.connect_distance,
            connect_all=args.connect_all,
        )
        colony = AntColony(city_map, params, seed=args.seed)
    except (ValueError, RuntimeError) as exc:
        parser.error(str(exc))

    if args.animate or args.gif:
        per_frame = max(1, min(100, params.max_iterations))
        frames = max(1, -(-params.max_iterations // per_frame))
        animate_colony(colony, frames=frames, iterations_per_frame=per_frame, gif_path=args.gif, show=args.animate)
        snapshot = colony.snapshot()
    else:
        snapshot = colony.run(progress=args.progress)

    print("cities:", len(city_map.cities), "roads:", len(city_map.roads))
    print(f"iterations: {snapshot.iterations} (ignored {snapshot.ignored})")
    if snapshot.best_distance is None:
        print("no complete tour found")
    else:
        print(f"min distance: {snapshot.best_distance:.2f}")
        print("found at iteration:", snapshot.best_iteration)

    if args.plot:
        plot_map(colony, snapshot=snapshot)
        plt.show()

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
