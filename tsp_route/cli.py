import argparse
import json
import logging
import math
import time
from dataclasses import replace
from pathlib import Path

from tsp_route.data import load_instance
from tsp_route.depot import optimize_route
from tsp_route.portfolio import PortfolioConfig, solve as solve_route
from tsp_route.solvers.base import tour_cost


logger = logging.getLogger("tsp_route.cli")


def log(msg: str) -> None:
    logger.info(msg)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_config(args) -> PortfolioConfig:
    cfg = PortfolioConfig()
    overrides = {}
    if args.population_size is not None:
        overrides["population_size"] = args.population_size
    if args.generations is not None:
        overrides["generations"] = args.generations
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if overrides:
        cfg = replace(cfg, genetic=replace(cfg.genetic, **overrides))
    return cfg


def _format_cost(cost: float):
    return None if math.isinf(cost) else cost


def solve_command(args, parser: argparse.ArgumentParser) -> None:
    t0 = time.perf_counter()
    path = Path(args.path)
    try:
        instance = load_instance(path)
        log(f"loaded {instance.name} ({len(instance.matrix)} locations) from {path}")
        cfg = _build_config(args)
        if args.depot:
            result = optimize_route(
                instance.matrix,
                has_depot=True,
                return_to_depot=not args.no_return,
                points=instance.points,
                config=cfg,
            )
            order, cost = result.order, result.cost
        else:
            closed = not args.open
            order = solve_route(instance.matrix, args.start, closed, cfg)
            cost = tour_cost(order, instance.matrix, closed)
    except (ValueError, KeyError, OSError) as exc:
        parser.error(str(exc))
        return
    log(f"solved in {time.perf_counter() - t0:.2f}s")

    if args.json:
        doc = {"name": instance.name, "order": order, "cost": _format_cost(cost)}
        if instance.points:
            doc["labels"] = [instance.points[i].label for i in order]
        print(json.dumps(doc))
        return
    print(" -> ".join(str(i) for i in order))
    print(f"cost: {cost:.2f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="TSP route optimizer CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every candidate")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Optimize the visiting order for a matrix or point set")
    solve_parser.add_argument("path", help="JSON document ({'matrix': ...} or {'points': ...}) or TSPLIB file")
    solve_parser.add_argument("--depot", action="store_true", help="Treat location 0 as the depot")
    solve_parser.add_argument("--no-return", action="store_true", help="With --depot, end at the last stop")
    solve_parser.add_argument("--open", action="store_true", help="Without --depot, do not close the tour")
    solve_parser.add_argument("--start", type=int, default=0)
    solve_parser.add_argument("--population-size", type=int, default=None)
    solve_parser.add_argument("--generations", type=int, default=None)
    solve_parser.add_argument("--seed", type=int, default=None)
    solve_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    solve_parser.set_defaults(func=solve_command)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args, solve_parser)


if __name__ == "__main__":
    main()
