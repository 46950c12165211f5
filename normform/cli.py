"""CLI for the normform score normalization and interpretation engine."""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from normform import __version__
from normform.config import (
    GlobalConfig,
    get_normform_home,
    get_norm_registry_path,
    get_schema_dir,
    load_global_config,
    save_global_config,
)
from normform.diagnostics import ProcessingStatus
from normform.errors import NormformError
from normform.interpretation import InterpretationContext, interpret, interpret_score
from normform.io import read_jsonl, to_json_line
from normform.pipeline import Pipeline, PipelineConfig
from normform.registry import NormNotFoundError, NormRegistry, NormValidationError

app = typer.Typer(
    name="normform",
    help="Score normalization and interpretation for psychological instruments.",
    no_args_is_help=True,
)
console = Console()

RegistryOption = Annotated[
    Path | None,
    typer.Option(
        "--registry",
        "-r",
        envvar="NORMFORM_NORM_REGISTRY",
        help="Path to the norm registry",
    ),
]
NameOption = Annotated[
    str | None, typer.Option("--name", help="Subject full name, e.g. 'Dela Cruz, Juan'")
]
SexOption = Annotated[str | None, typer.Option("--sex", help="Subject sex/gender")]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"normform version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """normform: Score normalization and interpretation engine."""
    pass


def _open_pipeline(
    instrument: str,
    registry: Path | None,
    instrument_version: str | None = None,
) -> Pipeline:
    registry_path = registry or get_norm_registry_path()
    if not registry_path.exists():
        console.print(f"[red]Error:[/red] Norm registry not found: {registry_path}")
        raise typer.Exit(1)

    schema_dir = get_schema_dir()
    try:
        return Pipeline(
            PipelineConfig(
                norm_registry_path=registry_path,
                instrument_id=instrument,
                instrument_version=instrument_version,
                schema_dir=schema_dir if schema_dir.exists() else None,
            )
        )
    except (NormNotFoundError, NormValidationError) as e:
        console.print(f"[red]Error loading instrument:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def score(
    instrument: Annotated[str, typer.Argument(help="Instrument ID, e.g. cfit")],
    raw_score: Annotated[str, typer.Argument(help="Raw score as entered")],
    name: NameOption = None,
    sex: SexOption = None,
    registry: RegistryOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
) -> None:
    """Normalize one raw score and print its interpretation."""
    pipeline = _open_pipeline(instrument, registry)
    if pipeline.instrument.kind != "conversion":
        console.print(
            f"[red]Error:[/red] {instrument} is a {pipeline.instrument.kind} instrument; "
            "use 'interpret' or 'run'"
        )
        raise typer.Exit(1)

    result = pipeline.process(
        {"raw_score": raw_score, "subject": {"name": name, "sex": sex}}
    )

    if as_json:
        console.print_json(result.model_dump_json())
    elif result.status == ProcessingStatus.SUCCESS:
        payload = result.result or {}
        table = Table(title=pipeline.instrument.name, show_header=False)
        table.add_row("Raw score", str(payload["raw_score"]))
        table.add_row("Percentile", str(payload["percentile"]))
        table.add_row("Standard score", str(payload["normalized_score"]))
        table.add_row("Classification", payload["classification"])
        if payload.get("clamped"):
            table.add_row("Clamped", payload["clamped"])
        console.print(table)
        console.print(payload["interpretation_text"])
    elif result.status == ProcessingStatus.NOT_ASSESSED:
        console.print("[yellow]Not yet assessed[/yellow]")
    else:
        for error in result.diagnostics.errors:
            console.print(f"[red]{error.code}:[/red] {error.message}")

    if result.status == ProcessingStatus.FAILED:
        raise typer.Exit(1)


@app.command("interpret")
def interpret_value(
    instrument: Annotated[str, typer.Argument(help="Instrument ID, e.g. bpi")],
    scale_key: Annotated[str, typer.Argument(help="Scale key, e.g. depression")],
    value: Annotated[str, typer.Argument(help="Selected value or score, e.g. high or 7")],
    name: NameOption = None,
    sex: SexOption = None,
    registry: RegistryOption = None,
) -> None:
    """Print the authored sentence for one categorical scale value."""
    pipeline = _open_pipeline(instrument, registry)
    if pipeline.instrument.kind != "categorical":
        console.print(f"[red]Error:[/red] {instrument} is not a categorical instrument")
        raise typer.Exit(1)

    context = InterpretationContext.from_subject(name, sex)
    try:
        if pipeline.instrument.score_levels:
            text = interpret_score(scale_key, value, pipeline.instrument, context)
        else:
            text = interpret(scale_key, value, pipeline.instrument, context)
    except NormformError as e:
        console.print(f"[red]{e.code}:[/red] {e.message}")
        raise typer.Exit(1)

    console.print(text)


@app.command()
def run(
    input_path: Annotated[
        Path,
        typer.Option("--in", "-i", help="Input JSONL file of assessment records"),
    ],
    output_path: Annotated[
        Path,
        typer.Option("--out", "-o", help="Output JSONL file path"),
    ],
    instrument: Annotated[
        str,
        typer.Option("--instrument", "-n", help="Instrument ID (required)"),
    ],
    instrument_version: Annotated[
        str | None,
        typer.Option("--instrument-version", help="Instrument version (default: latest)"),
    ] = None,
    registry: RegistryOption = None,
    diagnostics: Annotated[
        Path | None,
        typer.Option("--diagnostics", "-d", help="Diagnostics output JSONL path"),
    ] = None,
) -> None:
    """Score a JSONL file of assessment records and write results as JSONL."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(1)

    pipeline = _open_pipeline(instrument, registry, instrument_version)

    console.print(f"[bold]normform[/bold] v{__version__}")
    console.print(f"  Input: {input_path}")
    console.print(f"  Output: {output_path}")
    console.print(
        f"  Instrument: {pipeline.instrument.instrument_id}@{pipeline.instrument.version}"
    )
    console.print(f"  Registry: {pipeline.registry.registry_path}")
    if diagnostics:
        console.print(f"  Diagnostics: {diagnostics}")

    counts = {status: 0 for status in ProcessingStatus}
    skipped: list[tuple[int, str]] = []
    results_written = 0
    diagnostics_written = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Scoring records...", total=None)

        with open(output_path, "w", encoding="utf-8") as f_out:
            f_diag = open(diagnostics, "w", encoding="utf-8") if diagnostics else None

            try:
                for line_num, record in read_jsonl(input_path, skipped=skipped):
                    result = pipeline.process(record)
                    counts[result.status] += 1

                    f_out.write(to_json_line(result) + "\n")
                    results_written += 1

                    if f_diag:
                        f_diag.write(to_json_line(result.diagnostics) + "\n")
                        diagnostics_written += 1

                    progress.update(task, description=f"Scored {line_num} lines...")
            finally:
                if f_diag:
                    f_diag.close()

    for _, reason in skipped:
        console.print(f"[yellow]Warning:[/yellow] {reason}")

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Records processed: {sum(counts.values())}")
    console.print(f"  [green]Scored:[/green] {counts[ProcessingStatus.SUCCESS]}")
    if counts[ProcessingStatus.NOT_ASSESSED]:
        console.print(f"  [yellow]Not assessed:[/yellow] {counts[ProcessingStatus.NOT_ASSESSED]}")
    if counts[ProcessingStatus.FAILED]:
        console.print(f"  [red]Failed:[/red] {counts[ProcessingStatus.FAILED]}")
    if skipped:
        console.print(f"  [yellow]Skipped lines:[/yellow] {len(skipped)}")
    console.print(f"  Results written: {results_written}")
    if diagnostics:
        console.print(f"  Diagnostics written: {diagnostics_written}")


@app.command()
def validate(
    spec_type: Annotated[
        str,
        typer.Argument(help="Type of document to validate: table, bands, instrument"),
    ],
    spec_path: Annotated[
        Path,
        typer.Argument(help="Path to the document"),
    ],
    schema_path: Annotated[
        Path | None,
        typer.Option("--schema", "-s", help="Path to the schema file"),
    ] = None,
) -> None:
    """Validate a norm document against its schema."""
    import jsonschema

    if not spec_path.exists():
        console.print(f"[red]Error:[/red] Spec file not found: {spec_path}")
        raise typer.Exit(1)

    if schema_path is None:
        schema_files = {
            "table": "conversion_table.schema.json",
            "bands": "band_table.schema.json",
            "instrument": "instrument_spec.schema.json",
        }
        if spec_type not in schema_files:
            console.print(f"[red]Error:[/red] Unknown spec type: {spec_type}")
            raise typer.Exit(1)
        schema_path = get_schema_dir() / schema_files[spec_type]

    if not schema_path.exists():
        console.print(f"[red]Error:[/red] Schema file not found: {schema_path}")
        raise typer.Exit(1)

    with open(spec_path) as f:
        spec = json.load(f)

    with open(schema_path) as f:
        schema = json.load(f)

    try:
        jsonschema.validate(spec, schema)
        console.print(f"[green]Valid:[/green] {spec_path}")
    except jsonschema.ValidationError as e:
        console.print(f"[red]Invalid:[/red] {e.message}")
        raise typer.Exit(1)


@app.command("list")
def list_instruments(registry: RegistryOption = None) -> None:
    """List the instruments in the norm registry."""
    registry_path = registry or get_norm_registry_path()
    if not registry_path.exists():
        console.print(f"[red]Error:[/red] Norm registry not found: {registry_path}")
        raise typer.Exit(1)

    schema_dir = get_schema_dir()
    norms = NormRegistry(registry_path, schema_dir=schema_dir if schema_dir.exists() else None)

    table = Table(title=f"Instruments in {registry_path}")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Versions")

    for instrument_id in norms.list_instruments():
        try:
            spec = norms.get_instrument(instrument_id)
        except (NormNotFoundError, NormValidationError) as e:
            console.print(f"[red]Error loading instrument:[/red] {e}")
            raise typer.Exit(1)
        versions = norms.list_versions("instruments", instrument_id)
        table.add_row(instrument_id, spec.name, spec.kind, ", ".join(versions))

    console.print(table)


@app.command()
def init(
    registry: Annotated[
        Path,
        typer.Option("--registry", "-r", help="Norm registry to use by default"),
    ],
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config",
    ),
) -> None:
    """Write the global config pointing at a norm registry.

    Creates ~/.config/normform/config.yaml (or $NORMFORM_HOME/config.yaml).
    """
    if not registry.exists():
        console.print(f"[red]Error:[/red] Norm registry not found: {registry}")
        raise typer.Exit(1)

    home = get_normform_home()
    if (home / "config.yaml").exists() and not force:
        console.print(f"[yellow]Warning:[/yellow] Config already exists at {home / 'config.yaml'}")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    current = load_global_config() if force else GlobalConfig()
    config = current.model_copy(
        update={"default_norm_registry_path": str(registry.resolve())}
    )
    config_path = save_global_config(config)
    console.print(f"[green]✓[/green] Created config at {config_path}")


if __name__ == "__main__":
    app()
