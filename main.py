"""
Headless entry point: train the fish and report progress.
"""
import argparse
import sys

from loguru import logger

from antipredator.config.config_manager import ConfigManager
from antipredator.controller.simulation_controller import SimulationController
from antipredator.errors import ConfigError
from antipredator.trainers.q_trainer import QLearningTrainer


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Anti-predator fish Q-learning simulation")
    parser.add_argument("--config", type=str, default=None, help="JSON config overriding the defaults")
    parser.add_argument("--ticks", type=int, default=1000, help="Number of ticks to run")
    parser.add_argument("--speed", type=int, default=None, help="Simulation steps per tick (1-50)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--demo", action="store_true", help="Pure exploitation at speed 1")
    parser.add_argument("--report-every", type=int, default=100, help="Log metrics every N ticks")
    parser.add_argument("--dump-config", type=str, default=None, help="Write the effective config and exit")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    manager = ConfigManager()
    try:
        config = manager.load_from_file(args.config) if args.config else manager.create_default_config()
    except ConfigError as e:
        logger.error("{}", e)
        return 2

    errors = manager.validate(config)
    if errors:
        for error in errors:
            logger.error("Invalid config: {}", error)
        return 2

    if args.seed is not None:
        config['qlearning']['seed'] = args.seed
    if args.speed is not None:
        config['visualization']['steps_per_tick'] = args.speed

    if args.dump_config:
        manager.save_to_file(config, args.dump_config)
        logger.info("Config written to {}", args.dump_config)
        return 0

    try:
        trainer = QLearningTrainer(config)
    except ConfigError as e:
        logger.error("{}", e)
        return 2

    controller = SimulationController(trainer)
    if args.demo:
        controller.request_demo()

    for tick in range(1, args.ticks + 1):
        if trainer.is_finished():
            break
        _, metrics = controller.tick()
        if args.report_every and tick % args.report_every == 0:
            logger.info(
                "tick {} | generation {} | best {} | last {} | avg {:.1f} | epsilon {:.3f} | states {}",
                tick, metrics['generation'], metrics['best_time'], metrics['last_time'],
                metrics['avg_time'], metrics['epsilon'], metrics['discovered_states'],
            )

    metrics = trainer.get_metrics()
    logger.info("Done: {} generations, best survival {} ticks, {} states discovered",
                metrics['generation'], metrics['best_time'], metrics['discovered_states'])
    return 0


if __name__ == '__main__':
    sys.exit(main())
