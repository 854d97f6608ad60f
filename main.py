#!/usr/bin/env python3
"""Consul bootstrap CLI - configures and launches a Consul agent on a cloud instance.

Usage:
    # Server in a cluster discovered by instance tag
    python main.py --server --cluster-tag-name consul-servers

    # Client with a gossip key, keeping an existing default.json
    python main.py --client --encrypt-key "$KEY" --skip-consul-config
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from contracts import BootstrapError, ParameterOverrides
from orchestrator import BootstrapResult, run_bootstrap


console = Console()


class BootstrapCommand(click.Command):
    """Click command that reports usage errors with exit status 1."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_summary(result: BootstrapResult) -> None:
    """Print what a completed run wrote."""
    params = result.params
    console.print(f"[green]Role:[/green] {params.role.value}")
    console.print(f"[green]Run as:[/green] {params.user}")
    if result.facts:
        console.print(f"[green]Node:[/green] {result.facts.self_name} ({result.facts.self_ip})")
        console.print(f"[green]Datacenter:[/green] {result.facts.region}")
    if result.consul_config_path:
        console.print(f"[green]Consul config:[/green] {result.consul_config_path}")
    else:
        console.print("[dim]Consul config:[/dim] skipped")
    console.print(f"[green]Supervisor config:[/green] {result.supervisor_config_path}")
    console.print(f"[green]Duration:[/green] {result.duration_seconds:.2f}s")


@click.command(cls=BootstrapCommand)
@click.option("--server", is_flag=True, help="Run the agent in server mode")
@click.option("--client", is_flag=True, help="Run the agent in client mode")
@click.option(
    "--cluster-tag-name",
    default=None,
    help="Instance tag shared by cluster members; enables cloud auto-join"
)
@click.option(
    "--raft-protocol",
    type=int,
    default=None,
    help="Raft protocol version (default: 3)"
)
@click.option("--config-dir", default=None, help="Consul config directory (default: <install>/config)")
@click.option("--data-dir", default=None, help="Consul data directory (default: <install>/data)")
@click.option("--log-dir", default=None, help="Consul log directory (default: <install>/log)")
@click.option("--bin-dir", default=None, help="Directory holding the consul binary (default: <install>/bin)")
@click.option("--user", default=None, help="User to run Consul as (default: owner of --config-dir)")
@click.option(
    "--skip-consul-config",
    is_flag=True,
    help="Do not generate default.json; still write the supervisor config"
)
@click.option(
    "--encrypt-key",
    default=None,
    help="Gossip encryption key written to the encrypt field"
)
@click.option(
    "--autopilot-cleanup-dead-servers",
    type=click.BOOL,
    default=None,
    help="Remove dead servers when a new one joins (default: true)"
)
@click.option(
    "--autopilot-last-contact-threshold",
    default=None,
    help="Max time since a server last contacted the leader (default: 200ms)"
)
@click.option(
    "--autopilot-max-trailing-logs",
    type=click.IntRange(min=0),
    default=None,
    help="Max log entries a server may trail the leader by (default: 250)"
)
@click.option(
    "--autopilot-server-stabilization-time",
    default=None,
    help="Minimum healthy time before a server becomes a voter (default: 10s)"
)
@click.option(
    "--autopilot-redundancy-zone-tag",
    default=None,
    help="Node meta key for redundancy zones; empty disables (default: az)"
)
@click.option(
    "--autopilot-disable-upgrade-migration",
    type=click.BOOL,
    default=None,
    help="Disable upgrade migrations (default: false)"
)
@click.option(
    "--autopilot-upgrade-version-tag",
    default=None,
    help="Node meta key holding the version used for upgrade migrations"
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(
    server: bool,
    client: bool,
    cluster_tag_name: Optional[str],
    raft_protocol: Optional[int],
    config_dir: Optional[str],
    data_dir: Optional[str],
    log_dir: Optional[str],
    bin_dir: Optional[str],
    user: Optional[str],
    skip_consul_config: bool,
    encrypt_key: Optional[str],
    autopilot_cleanup_dead_servers: Optional[bool],
    autopilot_last_contact_threshold: Optional[str],
    autopilot_max_trailing_logs: Optional[int],
    autopilot_server_stabilization_time: Optional[str],
    autopilot_redundancy_zone_tag: Optional[str],
    autopilot_disable_upgrade_migration: Optional[bool],
    autopilot_upgrade_version_tag: Optional[str],
    verbose: bool,
):
    """Configure a Consul agent from instance metadata and run it under supervisord.

    Exactly one of --server or --client is required.
    """
    configure_logging(verbose)

    overrides = ParameterOverrides(
        server=server,
        client=client,
        cluster_tag_name=cluster_tag_name,
        raft_protocol=raft_protocol,
        config_dir=config_dir,
        data_dir=data_dir,
        log_dir=log_dir,
        bin_dir=bin_dir,
        user=user,
        skip_consul_config=skip_consul_config,
        encrypt_key=encrypt_key,
        autopilot_cleanup_dead_servers=autopilot_cleanup_dead_servers,
        autopilot_last_contact_threshold=autopilot_last_contact_threshold,
        autopilot_max_trailing_logs=autopilot_max_trailing_logs,
        autopilot_server_stabilization_time=autopilot_server_stabilization_time,
        autopilot_redundancy_zone_tag=autopilot_redundancy_zone_tag,
        autopilot_disable_upgrade_migration=autopilot_disable_upgrade_migration,
        autopilot_upgrade_version_tag=autopilot_upgrade_version_tag,
    )

    console.print(Panel.fit(
        "[bold blue]Consul Bootstrap[/bold blue]\n"
        "[dim]Metadata-driven agent configuration[/dim]",
        border_style="blue"
    ))

    try:
        result = run_bootstrap(overrides)
    except BootstrapError as exc:
        console.print(f"[red]Error ({type(exc).__name__}):[/red] {exc}")
        sys.exit(exc.exit_code)

    console.print("\n" + "=" * 60)
    print_summary(result)
    console.print("=" * 60)


if __name__ == "__main__":
    main()
