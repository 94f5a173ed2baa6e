"""Load balancer reconciler CLI (lbctl).

Offline helpers around the reconciliation unit. Talking to a provider
needs an adapter implementing LoadBalancerCloud, which lives outside
this package.

Usage:
    lbctl validate lb.yaml   # Load a spec and run creation-time checks
    lbctl backoff            # Show the provisioning poll schedule
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigurationError, ReconcilerConfig
from .errors import ReconcileError
from .main import setup_logging
from .spec_loader import SpecLoadError, load_load_balancer_spec
from .task import DEPENDENCY_KINDS, LoadBalancerTask


def _load_config() -> ReconcilerConfig:
    try:
        return ReconcilerConfig.from_env()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version="0.1.0", prog_name="lbctl")
def cli() -> None:
    """Load balancer reconciler CLI (lbctl)."""
    config = _load_config()
    setup_logging(json_output=config.log_json, level=config.log_level_value)


@cli.command()
@click.argument("spec_file", type=click.Path(dir_okay=False, path_type=Path))
def validate(spec_file: Path) -> None:
    """Load SPEC_FILE and check it can be used to create a load balancer."""
    try:
        desired = load_load_balancer_spec(spec_file)
        task = LoadBalancerTask(desired)
        # Nothing exists yet from an offline point of view
        task.check_changes(None, desired)
    except (SpecLoadError, ReconcileError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"name:           {desired.name}")
    click.echo(f"subnet:         {desired.subnet or '-'}")
    group = desired.security_group.name if desired.security_group else "-"
    click.echo(f"security group: {group}")
    click.echo(f"lifecycle:      {desired.lifecycle.value}")
    kinds = ", ".join(sorted(kind.value for kind in DEPENDENCY_KINDS))
    click.echo(f"depends on:     {kinds}")
    click.secho("✓ Spec is valid", fg="green")


@cli.command()
def backoff() -> None:
    """Show the provisioning poll schedule."""
    schedule = _load_config().backoff()

    click.echo(
        f"initial delay {schedule.initial_delay_seconds}s, "
        f"factor {schedule.factor}, {schedule.steps} attempts"
    )
    elapsed = 0.0
    for attempt, delay in enumerate(schedule.delays(), start=1):
        elapsed += delay
        click.echo(f"  attempt {attempt:>3}: sleep {delay:8.2f}s (elapsed {elapsed:8.2f}s)")
    click.echo(f"total wait bound: {schedule.total_wait_seconds:.1f}s")
