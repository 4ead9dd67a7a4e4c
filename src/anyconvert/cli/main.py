"""Command-line interface for anyconvert."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from anyconvert import __version__
from anyconvert.core.capabilities import CapabilityRegistry
from anyconvert.core.dispatcher import ConversionDispatcher
from anyconvert.exceptions import UnsupportedConversionError
from anyconvert.models.config import ConversionConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.utils.filename import sanitize_filename
from anyconvert.utils.logging import set_log_level

console = Console(stderr=True)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="anyconvert")
@click.option("-v", "--verbose", is_flag=True, help="Log conversion steps")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """anyconvert - convert documents, images, audio and video."""
    if verbose:
        set_log_level("INFO")
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="convert")
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option("-t", "--to", "target", required=True, help="Output format, e.g. pdf")
@click.option(
    "-o", "--output-dir",
    type=click.Path(file_okay=False),
    help="Directory for converted files (default: next to the input)",
)
@click.option("--timeout", type=float, default=None, help="Per-file time limit in seconds")
@click.option("--force", is_flag=True, help="Skip the supported-format check")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON report")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress output")
def convert_cmd(
    files: tuple[str, ...],
    target: str,
    output_dir: Optional[str],
    timeout: Optional[float],
    force: bool,
    as_json: bool,
    quiet: bool,
) -> None:
    """Convert files to another format.

    Examples:

        anyconvert convert report.txt -t pdf

        anyconvert convert *.wav -t mp3 -o converted/
    """
    if not files:
        console.print("[red]Error: No files specified[/red]")
        sys.exit(1)

    config = ConversionConfig.from_env()
    if timeout is not None:
        config.timeout_seconds = timeout if timeout > 0 else None

    requests = []
    sources: dict[int, Path] = {}
    report = []
    for file_path in files:
        if not force:
            try:
                CapabilityRegistry.validate(Path(file_path).name, target)
            except UnsupportedConversionError as e:
                console.print(f"[red]SKIP[/red] {file_path}: {e.message}")
                report.append({"file": file_path, "success": False, "error": e.message})
                continue
        request = ConversionRequest.from_path(file_path, target)
        sources[id(request)] = Path(file_path)
        requests.append(request)

    dispatcher = ConversionDispatcher(config)
    failed = len(report)

    for request, outcome in dispatcher.dispatch_batch(
        requests, show_progress=not quiet and not as_json,
    ):
        source = sources[id(request)]
        if outcome.success:
            target_dir = Path(output_dir) if output_dir else source.parent
            target_dir.mkdir(parents=True, exist_ok=True)
            destination = target_dir / sanitize_filename(outcome.filename)
            destination.write_bytes(outcome.data)
            report.append({"file": str(source), "output": str(destination)} | outcome.to_dict())
            if not quiet:
                console.print(f"[green]OK[/green] {source} -> {destination}")
        else:
            failed += 1
            report.append({"file": str(source)} | outcome.to_dict())
            console.print(f"[red]FAIL[/red] {source}: {outcome.message}")

    if as_json:
        click.echo(json.dumps(report, indent=2, default=str))

    if failed:
        sys.exit(1)


@cli.command()
@click.argument("filename", required=False)
def formats(filename: Optional[str]) -> None:
    """List supported formats, or the outputs available for FILENAME."""
    if filename:
        outputs = CapabilityRegistry.supported_outputs_for(filename)
        category = CapabilityRegistry.category_of(filename)
        if not outputs:
            console.print(f"[red]No conversions available for {filename}[/red]")
            sys.exit(1)
        click.echo(f"{filename} ({category.value}): {', '.join(outputs)}")
        return

    table = Table(title="Supported Formats")
    table.add_column("Category", style="cyan")
    table.add_column("Inputs", style="green")
    table.add_column("Outputs", style="yellow")

    for category, entry in CapabilityRegistry.table().items():
        table.add_row(
            category.value,
            ", ".join(sorted(entry.inputs)),
            ", ".join(CapabilityRegistry.category_outputs(category)),
        )

    Console().print(table)


@cli.command()
def doctor() -> None:
    """Check which conversion providers are available."""
    config = ConversionConfig.from_env()
    dispatcher = ConversionDispatcher(config)

    table = Table(title="Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Status")
    table.add_column("Missing", style="yellow")

    for provider in dispatcher.providers.all():
        info = provider.describe()
        status = "[green]available[/green]" if info["available"] else "[red]unavailable[/red]"
        table.add_row(info["name"], status, ", ".join(info["missing"]) or "-")

    out = Console()
    out.print(table)

    version = dispatcher.providers.transcoder.version()
    out.print(f"ffmpeg: {version or '[red]not found[/red]'}")


if __name__ == "__main__":
    cli()
