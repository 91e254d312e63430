"""Root CLI group for PodPace."""

from __future__ import annotations

import click

from podpace import __version__
from podpace.models.config import Settings
from podpace.utils.progress import log_error


@click.group()
@click.version_option(version=__version__, prog_name="podpace")
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to podpace.yaml (default: ./podpace.yaml if present)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """PodPace — per-speaker speaking rate normalization for podcasts."""
    try:
        ctx.obj = Settings.load(config_path)
    except ValueError as e:
        log_error(f"Invalid configuration: {e}")
        raise SystemExit(1)


# Import and register subcommands
from podpace.cli.analyze_cmd import analyze_cmd  # noqa: E402
from podpace.cli.adjust_cmd import adjust_cmd  # noqa: E402
from podpace.cli.status_cmd import status_cmd  # noqa: E402
from podpace.cli.resume_cmd import resume_cmd  # noqa: E402

cli.add_command(analyze_cmd, "analyze")
cli.add_command(adjust_cmd, "adjust")
cli.add_command(status_cmd, "status")
cli.add_command(resume_cmd, "resume")
