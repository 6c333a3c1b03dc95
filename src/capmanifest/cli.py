"\"\"\"Typer CLI entrypoint for viewer compatibility checks.\"\"\""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .errors import MetadataLoadError
from .logging import configure_logging
from .schemas.config import load_config

app = typer.Typer(help="OME-Zarr viewer compatibility CLI.")


@app.command()
def check(
    dataset: Path = typer.Option(
        ...,
        exists=True,
        readable=True,
        help="OME-Zarr store directory or normalized metadata JSON path.",
    ),
    manifest: Optional[List[str]] = typer.Option(
        None,
        help="Manifest file path or URL. Repeatable; defaults to the viewer registry.",
    ),
    data_url: Optional[str] = typer.Option(None, help="Dataset URL substituted into viewer launch links."),
    output: Optional[Path] = typer.Option(
        None,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    show_all: bool = typer.Option(False, "--all", help="Report incompatible viewers too."),
    details: bool = typer.Option(False, help="Print errors and warnings per viewer."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Check which viewers can open a dataset."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid config file: {exc}", param_hint="config") from exc

    configure_logging(log_level)

    container = create_container(settings=settings)
    pipeline = container.pipeline()

    try:
        report = pipeline.run(
            dataset=dataset,
            sources=manifest,
            data_url=data_url,
            output_path=output,
            include_incompatible=show_all,
        )
    except MetadataLoadError as exc:
        raise typer.BadParameter(str(exc), param_hint="dataset") from exc

    for result in report["results"]:
        status = "compatible" if result["compatible"] else "incompatible"
        typer.echo(f"{result['name']} ({result['version']}): {status}")
        if result["launch_url"]:
            typer.echo(f"  launch: {result['launch_url']}")
        if details:
            for error in result["errors"]:
                typer.echo(f"  error [{error['capability']}]: {error['message']}")
            for warning in result["warnings"]:
                typer.echo(f"  warning [{warning['capability']}]: {warning['message']}")

    meta = report["metadata"]
    compatible_count = sum(1 for result in report["results"] if result["compatible"])
    typer.echo(
        f"{compatible_count} of {meta['viewers_checked']} viewers can open the dataset "
        f"(OME-Zarr {meta['data_version'] or 'unknown'})."
    )
    for failure in meta["failures"]:
        typer.echo(f"Skipped manifest {failure['source']}: {failure['reason']}", err=True)
    if output:
        typer.echo(f"Report saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
