"""Command line entry point for BlackDuck deployments."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich import print as rich_print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .compiler import ComponentList, compile_application
from .config import ApplicationSpec, ClusterContext, DeployConfig
from .errors import ConfigurationError
from .flavors import FlavorResolver, load_flavors
from .kube import ClusterAPI
from .operations.deploy import DeployOperations
from .render import OUTPUT_FORMATS, render

app = typer.Typer(help="Compile BlackDuck application specs into Kubernetes and OpenShift manifests.")

err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, log_time_format="%X")],
    )


def _create_api(context: ClusterContext) -> ClusterAPI:
    return ClusterAPI(context)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]{message}[/red]")
    return typer.Exit(code=2)


def _flavor_resolver(flavor_file: Optional[Path]) -> FlavorResolver:
    if flavor_file is None:
        return FlavorResolver()
    return FlavorResolver(load_flavors(flavor_file))


def _compile(spec: ApplicationSpec, flavor_file: Optional[Path], workers: int = 1) -> ComponentList:
    try:
        components = compile_application(spec, flavors=_flavor_resolver(flavor_file), max_workers=workers)
    except ConfigurationError as exc:
        raise _fail(f"Configuration error: {exc}") from exc
    for warning in components.diagnostics:
        err_console.print(f"[yellow]warning[/yellow] {warning}")
    return components


def _load_deploy_config(
    config_path: Path,
    namespace: Optional[str],
    kube_context: Optional[str],
    kubeconfig: Optional[Path],
) -> DeployConfig:
    try:
        deploy_config = DeployConfig.from_file(config_path)
    except (ValueError, yaml.YAMLError) as exc:
        raise _fail(f"Invalid configuration file {config_path}: {exc}") from exc
    if namespace:
        deploy_config.application = deploy_config.application.model_copy(update={"namespace": namespace})
    if kube_context:
        deploy_config.context.context = kube_context
    if kubeconfig:
        deploy_config.context.kubeconfig = str(kubeconfig)
    return deploy_config


@app.command("compile")
def compile_spec(
    spec_path: Path = typer.Argument(..., help="Path to the application spec (YAML)."),
    output: str = typer.Option("yaml", "--output", "-o", help="Manifest format: yaml or json."),
    output_file: Optional[Path] = typer.Option(None, help="Write manifests to this file instead of stdout."),
    flavor_file: Optional[Path] = typer.Option(None, help="YAML file with extra or replacement flavors."),
    workers: int = typer.Option(1, help="Number of builders to run concurrently."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Print the manifests for an application without touching a cluster."""

    _configure_logging(verbose)
    if output not in OUTPUT_FORMATS:
        raise _fail(f"Unsupported output format {output!r}; expected one of {', '.join(OUTPUT_FORMATS)}.")
    try:
        spec = ApplicationSpec.from_file(spec_path)
    except (ValueError, yaml.YAMLError) as exc:
        raise _fail(f"Invalid application spec {spec_path}: {exc}") from exc

    components = _compile(spec, flavor_file, workers)
    manifests = render(components.flatten(), output)
    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(manifests)
        err_console.print(f"[green]Wrote {len(components)} objects to {output_file}.[/green]")
    else:
        typer.echo(manifests, nl=False)


@app.command("apply")
def apply_spec(
    config_path: Path = typer.Argument(..., help="Path to the deploy configuration file."),
    namespace: Optional[str] = typer.Option(None, help="Override the namespace defined in the config."),
    kube_context: Optional[str] = typer.Option(None, "--context", help="Override kubeconfig context."),
    kubeconfig: Optional[Path] = typer.Option(None, help="Path to kubeconfig file."),
    flavor_file: Optional[Path] = typer.Option(None, help="YAML file with extra or replacement flavors."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compile and log, but do not contact the cluster."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Compile the application and create or update its objects in the cluster."""

    _configure_logging(verbose)
    deploy_config = _load_deploy_config(config_path, namespace, kube_context, kubeconfig)
    components = _compile(deploy_config.application, flavor_file)

    api = None if dry_run else _create_api(deploy_config.context)
    DeployOperations(api).apply_all(components, dry_run=dry_run)

    table = Table(title=f"Objects for {deploy_config.application.name}")
    table.add_column("Kind")
    table.add_column("Count", justify="right")
    for kind, count in components.counts().items():
        table.add_row(kind, str(count))
    rich_print(table)
    verb = "validated" if dry_run else "applied"
    rich_print(f"[green]{deploy_config.application.name} {verb} successfully.[/green]")


@app.command("delete")
def delete_spec(
    config_path: Path = typer.Argument(..., help="Path to the deploy configuration file."),
    namespace: Optional[str] = typer.Option(None, help="Override the namespace defined in the config."),
    kube_context: Optional[str] = typer.Option(None, "--context", help="Override kubeconfig context."),
    kubeconfig: Optional[Path] = typer.Option(None, help="Path to kubeconfig file."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Delete every object the application would create."""

    _configure_logging(verbose)
    deploy_config = _load_deploy_config(config_path, namespace, kube_context, kubeconfig)
    components = _compile(deploy_config.application, None)
    DeployOperations(_create_api(deploy_config.context)).delete_all(components)
    rich_print(f"[green]{deploy_config.application.name} deleted.[/green]")


@app.command("flavors")
def list_flavors(
    flavor_file: Optional[Path] = typer.Option(None, help="YAML file with extra or replacement flavors."),
) -> None:
    """Show the CPU and memory every size gives each component."""

    try:
        resolver = _flavor_resolver(flavor_file)
    except ConfigurationError as exc:
        raise _fail(str(exc)) from exc

    table = Table(title="Flavors")
    for column in ("Size", "Component", "CPU request", "CPU limit", "Memory request", "Memory limit"):
        table.add_column(column)
    for size in resolver.sizes():
        for component, envelope in resolver.flavor(size).items():
            table.add_row(
                size,
                component,
                envelope.cpu_request or "-",
                envelope.cpu_limit or "-",
                envelope.memory_request or "-",
                envelope.memory_limit or "-",
            )
    rich_print(table)


def main() -> None:
    app()
