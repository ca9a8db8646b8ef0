# school_finance/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from school_finance import schema
from school_finance.config.loaders import ConfigLoadError, load_input_parameters
from school_finance.config.models import InputParameters
from school_finance.logging_config import ERROR_LOGGER, setup_logging
from school_finance.projections.engine import DEFAULT_PERIOD_COUNT, project
from school_finance.projections.reporting import (
    projections_to_frame,
    save_projection_results,
    summarize_projections,
)
from school_finance.scenarios.ports import JsonFilePort, PersistenceError
from school_finance.scenarios.store import ScenarioStore

# Get logger for this module
logger = logging.getLogger(__name__)

# Directory for log files
LOG_DIR = Path("output_dev/projection_logs")
DEFAULT_STORE = Path("scenarios.json")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="school-finance",
        description="Project school revenue, costs and surplus, and manage saved scenarios.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(LOG_DIR),
        help=f"Directory to store log files (default: {LOG_DIR})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    proj = sub.add_parser("project", help="Run a projection from a YAML parameter file.")
    proj.add_argument("--config", type=str, required=True, help="Path to the YAML parameter file.")
    proj.add_argument(
        "--periods",
        type=int,
        default=DEFAULT_PERIOD_COUNT,
        help=f"Number of projected periods (default: {DEFAULT_PERIOD_COUNT})",
    )
    proj.add_argument("--output-dir", type=str, default=None, help="Save CSV/YAML results here.")
    proj.add_argument(
        "--scenario-name",
        type=str,
        default="projection_cli",
        help="Name for the run, used in output file naming.",
    )

    scen = sub.add_parser("scenarios", help="Manage saved scenarios.")
    scen.add_argument(
        "--store",
        type=str,
        default=str(DEFAULT_STORE),
        help=f"Scenario store file (default: {DEFAULT_STORE})",
    )
    actions = scen.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="List saved scenarios.")
    save = actions.add_parser("save", help="Save parameters from a YAML file as a scenario.")
    save.add_argument("name", help="Scenario display name.")
    save.add_argument("--config", type=str, required=True, help="Path to the YAML parameter file.")
    for action in ("show", "delete", "project"):
        p = actions.add_parser(action, help=f"{action.capitalize()} a saved scenario.")
        p.add_argument("scenario_id", help="Scenario identifier.")
    return parser.parse_args(argv)


def _warn_on_issues(params: InputParameters) -> None:
    for issue in params.validation_issues():
        logger.warning(f"Parameter check: {issue}")


def _print_projection(params: InputParameters, periods: int) -> list:
    projections = project(params, periods)
    df = projections_to_frame(projections).set_index(schema.PERIOD)
    with pd.option_context("display.float_format", "{:,.2f}".format, "display.width", 160):
        print(df.to_string())
    return projections


def run_project(args: argparse.Namespace) -> None:
    logger.info(f"Loading parameters from: {args.config}")
    params = load_input_parameters(args.config)
    _warn_on_issues(params)

    projections = _print_projection(params, args.periods)
    summary = summarize_projections(projections)
    logger.info(f"Projection summary: {summary}")

    if args.output_dir:
        save_projection_results(Path(args.output_dir), args.scenario_name, projections)


def run_scenarios(args: argparse.Namespace) -> None:
    store = ScenarioStore(JsonFilePort(args.store))
    scenarios = store.load()

    if args.action == "list":
        if not scenarios:
            print("No saved scenarios.")
        for s in scenarios:
            print(f"{s.id}  {s.name}  (updated {s.updated_at.isoformat()})")
        return

    if args.action == "save":
        params = load_input_parameters(args.config)
        _warn_on_issues(params)
        scenario = store.create(args.name, params)
        store.save([*scenarios, scenario])
        print(scenario.id)
        return

    scenario = store.find(scenarios, args.scenario_id)
    if scenario is None:
        raise LookupError(f"No saved scenario with id {args.scenario_id}")

    if args.action == "show":
        print(f"{scenario.name} ({scenario.id})")
        for field, value in scenario.state.model_dump().items():
            print(f"  {field}: {value}")
    elif args.action == "delete":
        store.save(store.remove(scenarios, scenario.id))
        print(f"Deleted {scenario.id}")
    elif args.action == "project":
        _warn_on_issues(scenario.state)
        _print_projection(scenario.state, DEFAULT_PERIOD_COUNT)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the school-finance CLI."""
    err_logger = logging.getLogger(ERROR_LOGGER)
    args = parse_arguments(argv)

    try:
        setup_logging(log_dir=Path(args.log_dir), debug=args.debug)
    except OSError as e:
        print(f"Error initializing logging: {e}", file=sys.stderr)
        return 1
    logger.info(f"Starting run with arguments: {vars(args)}")

    try:
        if args.command == "project":
            run_project(args)
        else:
            run_scenarios(args)
        return 0
    except ConfigLoadError as e:
        err_logger.error(f"Invalid configuration: {e}")
    except PersistenceError as e:
        err_logger.error(f"Scenario store error: {e}", exc_info=True)
    except (LookupError, ValueError) as e:
        err_logger.error(str(e))
    return 1


if __name__ == "__main__":
    sys.exit(main())
