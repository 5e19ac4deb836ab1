"""CLI entrypoint for the retry kit."""

import logging
import random
from pathlib import Path

import click
import yaml
from dotenv import load_dotenv

from retry_kit.config import ConfigError, load_config
from retry_kit.constants import DEFAULT_REPORTS_DIR
from retry_kit.retry import BoundedRetryExecutor, OperationFailed

# Load .env file on CLI startup
load_dotenv()


def _setup_logging(level: str) -> None:
    logger = logging.getLogger("retry_kit")
    logger.setLevel(level)
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


@click.group()
@click.version_option(package_name="retry-kit")
@click.option(
    "--max-attempts",
    type=int,
    default=None,
    help="Attempt ceiling (default: RETRYKIT_MAX_ATTEMPTS or 10)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every attempt")
@click.pass_context
def cli(ctx, max_attempts, verbose):
    """Bounded retry executor demos."""
    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(1)

    if max_attempts is not None:
        config.max_attempts = max_attempts

    _setup_logging("INFO" if verbose else config.log_level)

    try:
        executor = BoundedRetryExecutor(config.max_attempts)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    # One executor per process, shared by every subcommand
    ctx.obj = {"config": config, "executor": executor}


@cli.command("check-config")
@click.pass_obj
def check_config(obj):
    """Show the resolved configuration."""
    config = obj["config"]
    click.echo("Configuration loaded successfully!")
    click.echo(f"  max_attempts: {config.max_attempts}")
    click.echo(f"  success_rate: {config.success_rate}")
    click.echo(f"  log_level:    {config.log_level}")


@cli.command()
@click.option(
    "--success-rate",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Chance that a single call passes (default: RETRYKIT_SUCCESS_RATE or 0.5)",
)
@click.option(
    "--max-attempts",
    type=int,
    default=None,
    help="Attempt ceiling for this run (default: the shared executor's)",
)
@click.option("--seed", type=int, default=None, help="Seed for a reproducible run")
@click.pass_obj
def demo(obj, success_rate, max_attempts, seed):
    """Retry a simulated flaky external call."""
    from retry_kit.services import FlakyService

    config = obj["config"]
    executor = obj["executor"]
    if max_attempts is not None:
        try:
            executor = BoundedRetryExecutor(max_attempts)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)

    rate = config.success_rate if success_rate is None else success_rate
    service = FlakyService(rate, rng=random.Random(seed))

    def attempt():
        click.echo("Calling external service...")
        try:
            return service.call()
        except OperationFailed:
            click.echo(f"Failed Attempt: {service.calls}")
            raise

    result = executor.execute(attempt)

    if result.succeeded:
        click.echo(f"Succeeded after {result.attempts} attempt(s)")
        raise SystemExit(0)
    click.echo(f"Retry maximum reached after {result.attempts} attempt(s). Exiting...")
    raise SystemExit(1)


@cli.command("run")
@click.argument("scenario_file", type=click.Path(exists=True))
@click.option(
    "--output-dir",
    type=click.Path(),
    default=DEFAULT_REPORTS_DIR,
    help=f"Directory for run reports (default: {DEFAULT_REPORTS_DIR})",
)
@click.pass_obj
def run_scenario_cmd(obj, scenario_file, output_dir):
    """Run a scenario definition file.

    SCENARIO_FILE: Path to scenario definition (YAML or JSON)

    Scenario format:

    \b
        name: flaky-login
        max_attempts: 10           # optional
        failures_before_success: 3 # or success_rate + seed
    """
    from retry_kit.scenario import format_elapsed, run_scenario

    scenario_path = Path(scenario_file).resolve()
    out_path = Path(output_dir).resolve()

    click.echo(f"Running scenario: {scenario_path}")

    try:
        scenario_run = run_scenario(
            scenario_path,
            out_path,
            default_max_attempts=obj["executor"].max_attempts,
        )
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except OSError as e:
        click.echo(f"File error: {e}", err=True)
        raise SystemExit(1)

    result = scenario_run.result
    click.echo(f"  Outcome:  {result.outcome.value}")
    click.echo(f"  Attempts: {result.attempts}/{result.max_attempts}")
    click.echo(f"  Duration: {format_elapsed(scenario_run.elapsed)}")
    click.echo(f"  Report:   {scenario_run.report_path}")

    raise SystemExit(0 if result.succeeded else 1)


@cli.command()
@click.argument("coins", nargs=-1, required=True)
def prices(coins):
    """Look up coin prices through the caching proxy.

    Repeated coins are served from the cache instead of the API.
    """
    from retry_kit.services import CachingPriceProxy, PriceAPI

    api = PriceAPI()
    proxy = CachingPriceProxy(api)

    for coin in coins:
        click.echo(f"  {coin}: {proxy.get_value(coin)}")

    click.echo()
    click.echo(f"API calls: {api.calls}, cache hits: {proxy.hits}")


if __name__ == "__main__":
    cli()
