"""Command line entry point for the netpingpong agent."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from netpingpong.config import (
    DEFAULT_HTTP_TIMEOUT,
    NODE_NAME_ENV,
    PROBE_INTERVAL_SECONDS,
    TAINT_NAME_ENV,
    TOKEN_PATH,
    AgentSettings,
    ServerSettings,
)
from netpingpong.exceptions import (
    ConfigurationError,
    FatalError,
    KubernetesError,
    TokenError,
)
from netpingpong.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="netpingpong",
    help="Node readiness gate: probe a peer relay, then remove a scheduling taint",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="LOG_LEVEL", help="Logging level (DEBUG, INFO, WARNING...)"
    ),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(level=log_level, verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")


@app.command()
def version() -> None:
    """Show version information."""
    from netpingpong import __version__

    typer.echo(f"netpingpong version {__version__}")


@app.command()
def serve(
    interval: float = typer.Option(
        PROBE_INTERVAL_SECONDS, "--interval", help="Seconds between probe ticks"
    ),
    token_path: Path = typer.Option(TOKEN_PATH, "--token-path", help="Bearer token file"),
    timeout: float = typer.Option(
        DEFAULT_HTTP_TIMEOUT, "--timeout", help="Timeout in seconds for outbound HTTP calls"
    ),
) -> None:
    """
    Run the relay endpoint and the probe-and-remediate loop.

    The relay listens on PORT (default :8080). Every interval the loop probes
    NETPong_ADDRESS and, on HTTP 200, removes TAINT_NAME from NODE_NAME.
    """
    from netpingpong.agent import build_probe_loop, build_server, run_agent

    try:
        server_settings = ServerSettings.from_env()
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    missing = AgentSettings.from_env().missing()
    if missing:
        logger.warning(f"Environment variables not set: {', '.join(missing)}")

    probe_loop = build_probe_loop(token_path=token_path, interval=interval, timeout=timeout)
    server = build_server(server_settings, timeout=timeout)

    logger.info(f"Server is listening on {server_settings.host}:{server_settings.port}")
    try:
        asyncio.run(run_agent(probe_loop, server))
    except FatalError as e:
        logger.critical(f"Exiting: {e.message}")
        raise typer.Exit(code=1)


@app.command()
def probe(
    address: str | None = typer.Option(
        None, "--address", "-a", help="Address to probe (default: NETPong_ADDRESS)"
    ),
    token_path: Path = typer.Option(TOKEN_PATH, "--token-path", help="Bearer token file"),
    timeout: float = typer.Option(DEFAULT_HTTP_TIMEOUT, "--timeout", help="Timeout in seconds"),
) -> None:
    """Send a single authenticated probe and report the outcome."""
    from netpingpong.probe import ProbeClient, read_token

    address = address if address is not None else AgentSettings.from_env().address

    try:
        token = read_token(token_path)
    except TokenError as e:
        console.print(f"[red]Token Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    client = ProbeClient(timeout=timeout)
    try:
        outcome = client.probe(address, token)
    finally:
        client.close()

    if outcome.is_healthy:
        console.print(f"[green]✓ {address} is {outcome}[/green]")
    else:
        console.print(f"[red]✗ {address} is {outcome}[/red]")
        raise typer.Exit(code=1)


@app.command()
def remove_taint(
    node_name: str | None = typer.Argument(
        None, envvar=NODE_NAME_ENV, help="Node to update (default: NODE_NAME)"
    ),
    taint_key: str | None = typer.Argument(
        None, envvar=TAINT_NAME_ENV, help="Taint key to remove (default: TAINT_NAME)"
    ),
) -> None:
    """Remove a taint from a node once, without probing first."""
    from netpingpong.kube import KubernetesNodeClient
    from netpingpong.mutator import NodeMutator
    from netpingpong.remediation import TaintRemediator

    if not node_name or not taint_key:
        console.print("[red]Error:[/red] Both a node name and a taint key are required")
        raise typer.Exit(code=1)

    remediator = TaintRemediator(NodeMutator(KubernetesNodeClient()))
    try:
        record = remediator.remove_taint(node_name, taint_key)
    except FatalError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Taint {taint_key} is absent from node {node_name}[/green]")
    console.print(f"  Remaining taints: {len(record.taints)}")


@app.command()
def taints(
    node_name: str | None = typer.Argument(
        None, envvar=NODE_NAME_ENV, help="Node to inspect (default: NODE_NAME)"
    ),
) -> None:
    """Show the taints currently set on a node."""
    from netpingpong.kube import KubernetesNodeClient

    if not node_name:
        console.print("[red]Error:[/red] A node name is required")
        raise typer.Exit(code=1)

    try:
        record = KubernetesNodeClient().get_node(node_name)
    except KubernetesError as e:
        console.print(f"[red]Kubernetes Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    if not record.taints:
        console.print(f"[yellow]Node {node_name} has no taints[/yellow]")
        return

    watched = AgentSettings.from_env().taint_name
    table = Table(title=f"Taints on {node_name}")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Effect", style="green")
    table.add_column("Added")

    for taint in record.taints:
        key = f"[bold]{taint.key}[/bold] (gate)" if taint.key == watched else taint.key
        added = taint.time_added.isoformat() if taint.time_added else ""
        table.add_row(key, taint.value or "", taint.effect, added)

    console.print(table)
    console.print(f"\n[bold]Resource version:[/bold] {record.resource_version}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
