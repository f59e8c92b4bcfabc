from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import BaseModel, ValidationError

from record_view.catalog import catalog_for
from record_view.config import get_settings
from record_view.errors import ViewError
from record_view.loader import RecordTypeLoadError, load_record_type
from record_view.reporter import print_bench, print_catalog
from record_view.utils.logging import configure_logging, get_logger
from record_view.utils.profiler import profile_block
from record_view.view import View

app = typer.Typer(help="Inspect and serialize partial views of pydantic records.")
log = get_logger(__name__)

MODEL_HELP = "Record type as 'package.module:ClassName'."
INPUT_HELP = "JSON file holding one record; reads stdin when omitted or '-'."
FIELDS_HELP = "Fields to include, e.g. 'id,name'. All fields when omitted."


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _load_view(model: str, source: Optional[Path], fields: Optional[str]) -> View:
    try:
        record_type = load_record_type(model)
        if source is None or str(source) == "-":
            raw = sys.stdin.read()
        else:
            raw = source.read_text(encoding="utf-8")
        record: BaseModel = record_type.model_validate_json(raw)
        view = View(record)
        if fields is not None:
            view = view.with_fields(fields)
    except (RecordTypeLoadError, ViewError, ValidationError, OSError) as exc:
        _fail(str(exc))
    log.debug("Loaded record", extra={"record_type": model, "fields": view.fields.names()})
    return view


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"default_selection={settings.default_selection} "
        f"field_separator={settings.field_separator!r} | "
        f"log_level={settings.log_level} log_json={settings.log_json} | "
        f"bench_iterations={settings.bench_iterations}"
    )


@app.command()
def fields(model: str = typer.Argument(..., help=MODEL_HELP)) -> None:
    """
    List the selectable fields of a record type.
    """
    try:
        catalog = catalog_for(load_record_type(model))
    except (RecordTypeLoadError, ViewError) as exc:
        _fail(str(exc))
    print_catalog(catalog)


@app.command()
def dump(
    model: str = typer.Argument(..., help=MODEL_HELP),
    source: Optional[Path] = typer.Argument(None, help=INPUT_HELP),
    fields: Optional[str] = typer.Option(None, "--fields", "-f", help=FIELDS_HELP),
    by_alias: bool = typer.Option(False, "--by-alias", help="Use serialization aliases as keys."),
    exclude_none: bool = typer.Option(False, "--exclude-none", help="Drop fields whose value is None."),
    indent: Optional[int] = typer.Option(None, "--indent", "-i", help="Pretty-print with this indent."),
) -> None:
    """
    Serialize a record, keeping only the selected fields.
    """
    view = _load_view(model, source, fields)
    typer.echo(view.model_dump_json(indent=indent, by_alias=by_alias or None, exclude_none=exclude_none))


@app.command()
def bench(
    model: str = typer.Argument(..., help=MODEL_HELP),
    source: Optional[Path] = typer.Argument(None, help=INPUT_HELP),
    fields: Optional[str] = typer.Option(None, "--fields", "-f", help=FIELDS_HELP),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", min=1, help="Serializations per run (default from settings)."
    ),
) -> None:
    """
    Compare view serialization against full-record serialization.
    """
    view = _load_view(model, source, fields)
    count = iterations or get_settings().bench_iterations
    record = view.record
    names = set(view.fields.names())

    runs = [
        ("full", len(view.catalog), lambda: record.model_dump_json()),
        ("include", len(names), lambda: record.model_dump_json(include=names)),
        ("view", len(names), view.model_dump_json),
    ]
    results = []
    for label, field_count, func in runs:
        log.info(f"[BENCH] {label}", extra={"iterations": count, "fields": field_count})
        with profile_block(label, iterations=count) as stats:
            for _ in range(count):
                func()
        stats.extra["fields"] = field_count
        results.append(stats)

    print_bench(results, baseline="full")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
