"""CLI entry point: inspect route helpers and check a controller's URL helpers."""

from __future__ import annotations

import logging
import sys
from types import SimpleNamespace
from typing import List, Optional

import click

from . import __version__


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Controller-aware URL helpers for Rails-style resource routes."""


@main.command()
@click.argument("source")
@click.option("--format", "fmt", type=click.Choice(["table", "yaml", "json"]),
              default="table", help="Output format (default: table)")
@click.option("--output", "-o", default=None,
              help="Write yaml/json output to a file instead of stdout")
@click.option("--host", envvar="RESOURCEFUL_HOST", default=None,
              help="Default host for *_url helpers")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def routes(source: str, fmt: str, output: Optional[str], host: Optional[str],
           verbose: bool) -> None:
    """List the named route helpers drawn by a routes file.

    SOURCE is a Rails application root or a routes.rb file.
    """
    _setup_logging(verbose)

    # Import here to keep CLI snappy for --help
    from rich.console import Console

    from .emitter import emit_helpers, emit_json, emit_yaml
    from .errors import ResourcefulError
    from .reporter import print_helpers
    from .route_loader import load_routes

    console = Console()
    try:
        route_set = load_routes(source, {"host": host} if host else None)
    except ResourcefulError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if fmt == "table":
        print_helpers(route_set, console)
        return

    document = emit_helpers(route_set)
    content = emit_json(document) if fmt == "json" else emit_yaml(document)
    if output:
        with open(output, "w") as f:
            f.write(content)
        console.print(f"[green]✓[/green] Route helpers written to: {output}")
    else:
        click.echo(content, nl=False)


@main.command()
@click.argument("source")
@click.argument("controller")
@click.option("--parent", default=None,
              help="Parent model the controller is nested under, e.g. Person")
@click.option("--host", envvar="RESOURCEFUL_HOST", default=None,
              help="Default host; when set the *_url helpers are checked instead")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def check(source: str, controller: str, parent: Optional[str], host: Optional[str],
          verbose: bool) -> None:
    """Resolve every standard URL helper of CONTROLLER against SOURCE's routes.

    CONTROLLER is a class name such as Admin::HatsController. Exits 1 when
    any helper does not exist.
    """
    _setup_logging(verbose)

    from rich.console import Console

    from .errors import ResourcefulError
    from .models import RequestContext, ResourceDescriptor
    from .reporter import print_check
    from .route_loader import load_routes
    from .urls import URLHelpers

    console = Console()
    try:
        route_set = load_routes(source, {"host": host} if host else None)
        descriptor = ResourceDescriptor.from_controller(controller)
    except ResourcefulError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    context = RequestContext(
        current_model_name=descriptor.singular_name,
        current_object=SimpleNamespace(id=1),
        parent_object=SimpleNamespace(id=1) if parent else None,
        parent_class_name=parent,
        namespaces=descriptor.namespaces,
    )
    results = check_helpers(URLHelpers(context, route_set.helpers), url=bool(host))
    print_check(controller, results, console)

    if any(r.result is None for r in results):
        sys.exit(1)


def check_helpers(url_helpers, url: bool = False) -> List:
    """Call the URL helper behind each of the seven RESTful actions.

    With ``url`` the ``*_url`` form of each helper is called instead of ``*_path``.
    """
    from .errors import ResourcefulError
    from .reporter import CheckResult
    from .urls import STANDARD_HELPERS

    logger = logging.getLogger("resourceful")
    results = []
    for action, method in STANDARD_HELPERS.items():
        if url:
            method = method.replace("_path", "_url")
        try:
            path = getattr(url_helpers, method)()
            error = None
        except ResourcefulError as e:
            logger.debug("%s#%s failed: %s", action, method, e)
            path, error = None, str(e)
        helper_name = url_helpers.last_resolution.helper_name
        results.append(CheckResult(action, method, helper_name, path, error))
    return results


if __name__ == "__main__":
    main()
