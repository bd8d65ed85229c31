"""Main entry point for the TerraData simulation core."""

import argparse
import sys

from loguru import logger


def play_greedy_week(sim, irrigate_per_week: int = 2) -> None:
    """Irrigate the driest zones and fertilize struggling ones while budgets allow."""
    from terradata.utils.constants import Resource

    cfg = sim.config.interventions
    driest = sorted(sim.grid.zones_matching(lambda z: z.soil_moisture < 0.3), key=lambda z: z.soil_moisture)
    targets = [z.zone_id for z in driest[:irrigate_per_week]]
    if targets and sim.ledger.can_afford(Resource.WATER, cfg.irrigation_cost * len(targets)):
        sim.apply_irrigation(targets)

    struggling = [z.zone_id for z in sim.grid.zones_matching(lambda z: z.vegetation_index < cfg.fertilizer_stressed_threshold)]
    if struggling and sim.ledger.can_afford(Resource.FERTILIZER, cfg.fertilizer_cost * len(struggling)):
        sim.apply_fertilizer(struggling)


def season_config(args):
    from terradata.utils.config import settings

    config = settings.model_copy(deep=True)
    if args.weeks is not None:
        config.simulation.max_weeks = args.weeks
    return config


def run_season(args) -> None:
    from terradata.core import Simulation, format_summary, season_summary

    sim = Simulation(config=season_config(args), seed=args.seed, crop_type=args.crop)
    sim.complete_tutorial()

    while not sim.clock.is_ended:
        if args.strategy == "greedy":
            play_greedy_week(sim)
        summary = sim.advance_week()
        for note in summary.notifications:
            logger.info(f"[{note.key}] {note.message}")

    logger.info(f"Final field: {sim.grid.summary()}")
    print(format_summary(season_summary(sim), args.format))


def show_weather(args) -> None:
    from terradata.core import Simulation

    sim = Simulation(config=season_config(args), seed=args.seed, crop_type=args.crop)
    print(sim.weather_frame().to_string())


def main():
    """Run the application."""
    from terradata.utils.logger import setup_logging

    parser = argparse.ArgumentParser(prog="terradata")
    parser.add_argument("command", choices=["run", "weather"])
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--weeks", type=int, default=None)
    parser.add_argument("--crop", default=None)
    parser.add_argument("--strategy", choices=["none", "greedy"], default="none")
    parser.add_argument("--format", choices=["markdown", "json"], default="markdown")
    args = parser.parse_args(sys.argv[1:])

    setup_logging()

    if args.command == "run":
        run_season(args)
    elif args.command == "weather":
        show_weather(args)


if __name__ == "__main__":
    main()
