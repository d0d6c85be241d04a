"""Command-line interface for terracache.

Example:
    >>> # From terminal:
    >>> # terracache --version
    >>> # terracache state show .terraform/terraform.tfstate
    >>> # terracache state is-remote terraform.tfstate
    >>> # terracache state locate ./live/prod/vpc
    >>> # terracache endpoints
    >>> # terracache serve --port 5758
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import uvicorn

from terracache import __version__
from terracache.cache.server import create_app
from terracache.config import CacheServerConfig
from terracache.errors import ConfigurationError, TerraCacheError
from terracache.models.state import TerraformState
from terracache.observability.logging import configure_logging
from terracache.remotestate import find_terraform_state_file, parse_terraform_state_file

app = typer.Typer(help="terracache CLI.")

state_app = typer.Typer(help="Inspect legacy Terraform state files.")
app.add_typer(state_app, name="state")


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show terracache version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(
    version: bool = VERSION_OPTION,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format: console or json."),
    ] = None,
) -> None:
    """terracache CLI entrypoint."""
    if log_level or log_format:
        configure_logging(log_format=log_format, log_level=log_level, force=True)


def _load_state(path: Path) -> TerraformState:
    try:
        return parse_terraform_state_file(path)
    except TerraCacheError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1) from e


@state_app.command("show")
def state_show(
    path: Annotated[Path, typer.Argument(help="Path to the state file.")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the parsed state as JSON.")
    ] = False,
) -> None:
    """Show version, serial, backend and modules of a state file."""
    state = _load_state(path)
    if as_json:
        typer.echo(json.dumps(state.model_dump(mode="json"), indent=2))
        return

    typer.echo(f"Version: {state.version}")
    typer.echo(f"Serial: {state.serial}")
    typer.echo(f"Backend: {state.backend.type if state.backend else 'local'}")
    typer.echo(f"Modules: {len(state.modules)}")
    for module in state.modules:
        typer.echo(f"  - {'.'.join(module.path)}")


@state_app.command("is-remote")
def state_is_remote(
    path: Annotated[Path, typer.Argument(help="Path to the state file.")],
) -> None:
    """Print true if the state file references a remote backend."""
    state = _load_state(path)
    typer.echo("true" if state.is_remote() else "false")


@state_app.command("locate")
def state_locate(
    working_dir: Annotated[Path, typer.Argument(help="Terraform working directory.")],
    data_dir: Annotated[
        Optional[Path],
        typer.Option("--data-dir", help="Terraform data dir (default: $TF_DATA_DIR or .terraform)."),
    ] = None,
) -> None:
    """Print the path of the state file used by a working directory."""
    state_path = find_terraform_state_file(working_dir, data_dir)
    if state_path is None:
        typer.echo(f"No state file found in {working_dir}", err=True)
        raise typer.Exit(1)
    typer.echo(str(state_path))


def _load_config(**overrides: object) -> CacheServerConfig:
    try:
        return CacheServerConfig.from_env(**overrides)
    except ConfigurationError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1) from e


@app.command("endpoints")
def endpoints() -> None:
    """Print the discovery document the cache server would serve."""
    config = _load_config()
    discovery = create_app(config).state.discovery
    typer.echo(json.dumps(discovery.merged_endpoints(), indent=2, sort_keys=True))


@app.command("serve")
def serve(
    host: Annotated[
        Optional[str], typer.Option("--host", help="Interface to bind.")
    ] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Port to bind.")] = None,
) -> None:
    """Run the registry cache server."""
    config = _load_config(host=host, port=port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


def main() -> None:
    """Run the terracache CLI."""
    app()


if __name__ == "__main__":
    main()
