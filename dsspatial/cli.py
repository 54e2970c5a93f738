"""Command line interface for dispatching spatial operations.

Each command logs in to every server listed in the login file, runs one
operation against all of them and prints the per-connection outcome.

Usage:
    dsspatial coordinates D Lon Lat --login-file login.json
    dsspatial coords-to-lines D.coords id --login-file login.json
    dsspatial g-buffer D.coords.lines 100 --by-id --login-file login.json
    dsspatial --help
"""

import logging
from collections.abc import Callable
from pathlib import Path

import typer
from pydantic import ValidationError

from dsspatial import operations
from dsspatial.common.log_utils import configure_logging
from dsspatial.config import ClientSettings, LoginConfig
from dsspatial.connections.base import Connection
from dsspatial.dispatch.errors import DispatchError
from dsspatial.dispatch.preconditions import remote_classes
from dsspatial.models.results import DispatchReport
from dsspatial.session import open_connections

logger = logging.getLogger(__name__)

app = typer.Typer(help="Dispatch spatial operations to DataSHIELD study servers")

LoginFileOption = typer.Option(
    None,
    "--login-file",
    "-l",
    help="JSON login file (default: DSSPATIAL_LOGIN_FILE)",
    exists=True,
    dir_okay=False,
)
NewObjOption = typer.Option(None, "--newobj", "-o", help="Name of the output object")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Configure logging before any command runs."""
    configure_logging(ClientSettings().log_json)
    if verbose:
        logging.getLogger("dsspatial").setLevel(logging.DEBUG)


def _load_login(login_file: Path | None, settings: ClientSettings) -> LoginConfig:
    path = login_file or settings.login_file
    if path is None:
        logger.error("No login file given; use --login-file or set DSSPATIAL_LOGIN_FILE")
        raise typer.Exit(1)
    return LoginConfig.from_file(path)


def _echo_report(report: DispatchReport) -> None:
    for result in report.results:
        status = "ok" if result.ok else f"FAILED ({result.error or 'output not created'})"
        typer.echo(f"{result.connection}: {report.output} {status}")


def _run(
    login_file: Path | None,
    operation: Callable[[list[Connection]], DispatchReport],
) -> DispatchReport:
    settings = ClientSettings()
    try:
        login = _load_login(login_file, settings)
        with open_connections(login, settings) as connections:
            report = operation(connections)
        _echo_report(report)
        if settings.fail_on_partial:
            report.raise_for_failures()
        return report
    except ValidationError as e:
        logger.error(f"Invalid login file: {e}")
        raise typer.Exit(1)
    except DispatchError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    except OSError as e:
        logger.error(f"Cannot read login file: {e}")
        raise typer.Exit(1)


@app.command()
def classes(
    symbol: str = typer.Argument(..., help="Remote object name"),
    login_file: Path | None = LoginFileOption,
):
    """Show the class of a remote object on each server."""
    settings = ClientSettings()
    try:
        login = _load_login(login_file, settings)
        with open_connections(login, settings) as connections:
            found = remote_classes(connections, symbol)
    except (ValidationError, DispatchError, OSError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    for name, remote_class in found.items():
        typer.echo(f"{name}: {remote_class}")


@app.command()
def coordinates(
    x: str = typer.Argument(..., help="Data frame name"),
    coords: list[str] = typer.Argument(..., help="Coordinate column names"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Convert a data frame to a point set."""
    _run(
        login_file,
        lambda conns: operations.coordinates(x, coords, newobj=newobj, connections=conns),
    )


@app.command()
def proj4string(
    x: str = typer.Argument(..., help="Spatial object name"),
    proj_str: int = typer.Argument(..., help="EPSG identifier"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Assign a coordinate system to a spatial object."""
    _run(
        login_file,
        lambda conns: operations.proj4string(x, proj_str, newobj=newobj, connections=conns),
    )


@app.command("sp-transform")
def sp_transform(
    x: str = typer.Argument(..., help="Point set name"),
    proj_str: int = typer.Argument(..., help="Target EPSG identifier"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Reproject a point set."""
    _run(
        login_file,
        lambda conns: operations.sp_transform(x, proj_str, newobj=newobj, connections=conns),
    )


@app.command("coords-to-lines")
def coords_to_lines(
    coords: str = typer.Argument(..., help="Point set name"),
    group: str = typer.Argument(..., help="Grouping column"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Join points into lines, one per group."""
    _run(
        login_file,
        lambda conns: operations.coords_to_lines(coords, group, newobj=newobj, connections=conns),
    )


@app.command("g-buffer")
def g_buffer(
    input: str = typer.Argument(..., help="Spatial object name"),
    ip_width: float = typer.Argument(..., help="Buffer width (negative shrinks polygons)"),
    by_id: bool = typer.Option(False, "--by-id", help="Buffer each geometry separately"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Buffer a spatial object."""
    _run(
        login_file,
        lambda conns: operations.g_buffer(
            input, by_id=by_id, ip_width=ip_width, newobj=newobj, connections=conns
        ),
    )


@app.command()
def over(
    x: str = typer.Argument(..., help="Query geometry object"),
    y: str = typer.Argument(..., help="Queried layer object"),
    fn: str | None = typer.Option(None, "--fn", help="Aggregation function name"),
    return_list: bool = typer.Option(False, "--return-list", help="Return every match"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Overlay two spatial objects."""
    _run(
        login_file,
        lambda conns: operations.over(
            x, y, fn=fn, return_list=return_list, newobj=newobj, connections=conns
        ),
    )


@app.command("over-match")
def over_match(
    x: str = typer.Argument(..., help="Spatial object the overlay was queried with"),
    x_id: str = typer.Argument(..., help="Identifying column of x"),
    over_out: str = typer.Argument(..., help="Overlay result"),
    y_id: str = typer.Argument(..., help="Identifying column of y"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Match an overlay result to the identifiers of x."""
    _run(
        login_file,
        lambda conns: operations.over_match(
            x, x_id, over_out, y_id, newobj=newobj, connections=conns
        ),
    )


@app.command()
def commute(
    input: str = typer.Argument(..., help="Journeys object"),
    id_col: str = typer.Argument(..., help="Individual identifier column"),
    loc1_col: str = typer.Argument(..., help="First location flag column"),
    loc2_col: str = typer.Argument(..., help="Second location flag column"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Flag commutes between two locations."""
    _run(
        login_file,
        lambda conns: operations.commute(
            input, id_col, loc1_col, loc2_col, newobj=newobj, connections=conns
        ),
    )


@app.command("spatial-lines-data-frame")
def spatial_lines_data_frame(
    lines: str = typer.Argument(..., help="SpatialLines object"),
    data: str = typer.Argument(..., help="Data frame with one row per line"),
    newobj: str | None = NewObjOption,
    login_file: Path | None = LoginFileOption,
):
    """Attach a data frame to a line set."""
    _run(
        login_file,
        lambda conns: operations.spatial_lines_data_frame(
            lines, data, newobj=newobj, connections=conns
        ),
    )


if __name__ == "__main__":
    app()
