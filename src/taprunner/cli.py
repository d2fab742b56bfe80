"""Command-line interface for TapRunner."""

import importlib
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from taprunner import EXIT_FAILURE, __version__
from taprunner.collaborators import NullLeakDetector, TracemallocLeakDetector
from taprunner.config import RunnerConfig, create_example_config
from taprunner.core.driver import TestDriver
from taprunner.core.registry import Registry, TapRunnerError


# Report lines own stdout; everything the CLI says goes to stderr.
console = Console(stderr=True)

DEFAULT_HOOK = "setup_tests"


def configure_logging(verbose: bool) -> None:
    """Send taprunner diagnostics to stderr through rich."""
    logger = logging.getLogger("taprunner")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_hook(target: str) -> Callable[[Registry], None]:
    """Resolve ``module`` or ``module:function`` to a registration hook."""
    module_name, _, attr = target.partition(":")
    if not module_name:
        raise click.BadParameter(f"{target!r} does not name a module", param_hint="TARGET")
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    importlib.invalidate_caches()
    module = importlib.import_module(module_name)
    hook = getattr(module, attr or DEFAULT_HOOK, None)
    if not callable(hook):
        raise click.BadParameter(
            f"{module_name} has no callable {attr or DEFAULT_HOOK!r}", param_hint="TARGET"
        )
    return hook


def load_config(config_path: Optional[str]) -> RunnerConfig:
    """Load the config file (if any), then apply environment overrides."""
    if config_path:
        config = RunnerConfig.from_file(config_path)
    else:
        found = RunnerConfig.find()
        config = RunnerConfig.from_file(found) if found else RunnerConfig()
    return config.merged_with_env()


@click.group()
@click.version_option(version=__version__, prog_name="taprunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: taprunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """TapRunner - run registered tests and report them as TAP."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    configure_logging(verbose)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="taprunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new TapRunner configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    create_example_config(output_path)
    console.print(f"[green]Created configuration file:[/green] {output_path}")


@main.command()
@click.argument("target")
@click.option("--seed", type=int, help="Run tests in random order (<= 0 picks a seed)")
@click.option("--level", type=int, help="Nesting level of the outer TAP harness")
@click.option("--leak-check/--no-leak-check", default=None, help="Check for leaked memory")
@click.option("--name", help="Program name used in the plan line (default: TARGET)")
@click.pass_context
def run(
    ctx: click.Context,
    target: str,
    seed: Optional[int],
    level: Optional[int],
    leak_check: Optional[bool],
    name: Optional[str],
) -> None:
    """Register the tests of TARGET and run them.

    TARGET is ``module`` or ``module:function``; the function (by default
    ``setup_tests``) is called with the registry and registers the tests.
    """
    try:
        config = load_config(ctx.obj.get("config_path"))
        overrides = {"seed": seed, "harness_level": level, "leak_check": leak_check}
        config = RunnerConfig.model_validate(
            {**config.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        )
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        sys.exit(EXIT_FAILURE)

    registry = Registry(capacity=config.capacity)
    try:
        hook = load_hook(target)
        hook(registry)
    except ImportError as e:
        console.print(f"[red]Cannot import test module:[/red] {e}")
        sys.exit(EXIT_FAILURE)
    except TapRunnerError as e:
        console.print(f"[red]Invalid test registration:[/red] {e}")
        sys.exit(EXIT_FAILURE)

    leak_detector = TracemallocLeakDetector() if config.leak_check else NullLeakDetector()
    driver = TestDriver(registry, config, leak_detector=leak_detector)
    status = driver.main(name or target)

    if ctx.obj.get("verbose"):
        summary = driver.summary
        console.print(
            f"[dim]{summary.passed}/{summary.total} tests passed "
            f"({summary.num_test_cases} cases, seed {summary.seed})[/dim]"
        )
    sys.exit(status)


if __name__ == "__main__":
    main()
