"""
Command-line interface for cubepack.

Generates and inspects solvable two-layer polycube packing puzzles, surveys
how reliably each difficulty generates, and manages configuration files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from cubepack.core.base import DifficultyLevel
from cubepack.core.config import Config, load_config, create_default_config, validate_config
from cubepack.game.catalog import STANDARD_CATALOG
from cubepack.generation.generator import PuzzleGenerator
from cubepack.runner import SurveyRunner
from cubepack.utils.display import StatusDisplay, LiveLogger, format_solution_layers, format_target_area
from cubepack.utils.logger import GenerationLogger, save_results_to_csv, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    difficulties = [d.value for d in DifficultyLevel]

    parser = argparse.ArgumentParser(
        description="cubepack: solvable two-layer polycube packing puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Generate one easy level and print its solution
  cubepack generate --difficulty easy --show-solution

  # Generate the level for round 5 with a fixed seed, as JSON
  cubepack generate --round 5 --seed 42 --json

  # Survey 20 levels per difficulty and save a CSV summary
  cubepack survey --count 20 --output survey.csv

  # List the four-block pieces
  cubepack list-pieces --block-count 4

  # Create and validate a configuration file
  cubepack create-config --output config.yaml
  cubepack validate-config config.yaml --strict

Difficulties: {', '.join(difficulties)}
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser("generate", help="Generate one solvable level")
    generate_parser.add_argument("--config", "-c", help="Path to configuration file")
    group = generate_parser.add_mutually_exclusive_group()
    group.add_argument("--difficulty", "-d", choices=difficulties, help="Difficulty tier")
    group.add_argument("--round", "-r", type=int, help="Round number (selects the tier)")
    generate_parser.add_argument("--seed", type=int, help="Random seed")
    generate_parser.add_argument("--max-attempts", type=int, help="Override attempt budget")
    generate_parser.add_argument("--show-solution", action="store_true", help="Print the solution layers")
    generate_parser.add_argument("--json", action="store_true", help="Print the level as JSON")
    generate_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    survey_parser = subparsers.add_parser("survey", help="Generate many levels and summarize")
    survey_parser.add_argument("--config", "-c", help="Path to configuration file")
    survey_parser.add_argument("--difficulties", nargs="+", choices=difficulties,
                               default=difficulties, help="Tiers to survey")
    survey_parser.add_argument("--count", "-n", type=int, default=10, help="Levels per tier")
    survey_parser.add_argument("--seed", type=int, help="Random seed")
    survey_parser.add_argument("--output", "-o",
                               help="CSV file to append the summary to (default: logging.results_csv_path)")
    survey_parser.add_argument("--log-dir", help="Write a JSON generation log under this directory")
    survey_parser.add_argument("--save-logs", action="store_true",
                               help="Write a JSON generation log under logging.log_dir")
    survey_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    list_parser = subparsers.add_parser("list-pieces", help="List catalog pieces")
    list_parser.add_argument("--block-count", type=int, help="Only pieces with this many blocks")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output configuration file")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    return parser


def _load_and_validate_config(path: Optional[str], logger: LiveLogger) -> Optional[Config]:
    """Load and validate configuration; None on errors."""
    if not path:
        return Config()
    try:
        config = load_config(path)
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {path}")
        logger.log_info("Use 'cubepack create-config' to create a default configuration")
        return None
    except Exception as e:
        logger.log_error(f"Configuration error: {e}")
        return None

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    for issue in issues:
        if issue.startswith("ERROR"):
            logger.log_error(issue.replace("ERROR: ", ""))
        else:
            logger.log_warning(issue.replace("WARNING: ", ""))
    return None if errors else config


def generate_command(args) -> int:
    """Execute generate command."""
    logger = LiveLogger(verbose=not args.json)

    config = _load_and_validate_config(args.config, logger)
    if config is None:
        return 1
    setup_logging("DEBUG" if args.verbose else config.logging.level)
    if args.max_attempts:
        config.generator.max_attempts = args.max_attempts

    generator = PuzzleGenerator.from_config(config, seed=args.seed)
    if args.difficulty:
        result = generator.generate_solvable_puzzle(DifficultyLevel(args.difficulty), args.round or 1)
    else:
        result = generator.generate_level(args.round or 1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.is_solved else 1

    StatusDisplay.print_header("cubepack Level Generation")
    summary = {
        "Status": result.status.value,
        "Difficulty": result.difficulty.display_name,
        "Round": result.round_number,
        "Attempts": result.attempts,
        "Elapsed (s)": result.elapsed,
    }
    if result.rejections:
        summary["Rejections"] = ", ".join(f"{k}={v}" for k, v in sorted(result.rejections.items()))
    StatusDisplay.print_table(summary, "Generation")

    level = result.level
    if level is None:
        logger.log_error("No solvable level found within the attempt budget")
        return 1

    StatusDisplay.print_table({
        "Time Limit": f"{level.time_limit:.0f}s",
        "Board Size": "x".join(str(n) for n in level.board_size),
        "Pieces": ", ".join(f"{p.name} ({p.id})" for p in level.pieces),
        "Verified": level.verified,
    }, "Level")
    StatusDisplay.print_section("Target Footprint")
    StatusDisplay.print_block(format_target_area(level.target_area))

    if args.show_solution and level.solution:
        StatusDisplay.print_section("Solution")
        StatusDisplay.print_block(format_solution_layers(level.target_area, level.solution))

    logger.log_result("Level generated")
    return 0


def survey_command(args) -> int:
    """Execute survey command."""
    logger = LiveLogger(verbose=True)

    config = _load_and_validate_config(args.config, logger)
    if config is None:
        return 1
    setup_logging("DEBUG" if args.verbose else config.logging.level)
    if args.count <= 0:
        logger.log_error("--count must be positive")
        return 1

    StatusDisplay.print_header(f"cubepack Survey - {args.count} per difficulty")
    log_dir = args.log_dir or (config.logging.log_dir if args.save_logs else None)
    generation_logger = GenerationLogger(log_dir, "survey") if log_dir else None
    runner = SurveyRunner(config, seed=args.seed, generation_logger=generation_logger)

    try:
        runner.run([DifficultyLevel(d) for d in args.difficulties], args.count, show_progress=True)
    except KeyboardInterrupt:
        logger.log_warning("Survey interrupted by user")
        return 1

    summary = runner.summarize()
    StatusDisplay.print_section("Summary")
    StatusDisplay.print_block(summary.to_string(index=False))

    if generation_logger is not None:
        generation_logger.save_logs()
    csv_path = args.output or config.logging.results_csv_path
    if csv_path:
        save_results_to_csv(summary.to_dict("records"), csv_path)
    return 0


def list_pieces_command(args) -> int:
    """Execute list-pieces command."""
    pieces = (STANDARD_CATALOG.get_by_block_count(args.block_count)
              if args.block_count else list(STANDARD_CATALOG))

    if args.format == "json":
        print(json.dumps([p.to_dict() for p in pieces], indent=2))
        return 0

    StatusDisplay.print_section(f"Pieces ({len(pieces)})")
    for p in pieces:
        blocks = " ".join(f"({b.x},{b.y},{b.z})" for b in p.blocks)
        print(f"  {p.id:<3} {p.name:<12} {p.block_count} blocks  {blocks}")
    return 0


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)

    if Path(args.output).exists() and not args.force:
        logger.log_error(f"Configuration file already exists: {args.output} (use --force)")
        return 1

    try:
        create_default_config(args.output)
    except OSError as e:
        logger.log_error(f"Failed to create config: {e}")
        return 1

    logger.log_result(f"Configuration created: {args.output}")
    logger.log_info("Validate it with: cubepack validate-config " + args.output)
    return 0


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)
    StatusDisplay.print_header("Configuration Validation")

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to load config: {e}")
        return 1

    StatusDisplay.print_table({
        "Max Attempts": config.generator.max_attempts,
        "Seed": config.generator.seed,
        "Shapes": ", ".join(config.generator.shapes),
        "Solver Budget": config.solver.max_nodes,
        "Overrides": ", ".join(config.difficulties) or "none",
    }, "Configuration Overview")

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]
    if args.strict and warnings:
        errors.extend(warnings)
        warnings = []

    for i, issue in enumerate(errors, 1):
        logger.log_error(f"{i}. {issue.replace('ERROR: ', '')}")
    for i, issue in enumerate(warnings, 1):
        logger.log_warning(f"{i}. {issue.replace('WARNING: ', '')}")

    StatusDisplay.print_table({
        "Valid": not errors,
        "Errors Found": len(errors),
        "Warnings Found": len(warnings),
    }, "Validation Summary")
    return 1 if errors else 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    command_handlers = {
        "generate": generate_command,
        "survey": survey_command,
        "list-pieces": list_pieces_command,
        "create-config": create_config_command,
        "validate-config": validate_config_command,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
