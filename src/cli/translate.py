"""CLI commands for translating record files."""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
import structlog

from src.features.observability.logging import configure_logging
from src.features.records.io import (
    SEED_SUFFIX,
    dump_records,
    load_records,
    seed_directives,
    write_records,
)
from src.features.translation.errors import (
    DirectiveValidationError,
    RecordParseError,
    TranslationFailure,
)
from src.features.translation.factory import create_engine
from src.features.translation.models import BatchResult, Directive
from src.settings import get_settings


logger = structlog.get_logger()

EXIT_INPUT_ERROR = 1
EXIT_PARTIAL_FAILURE = 2


@dataclass
class TranslateOptions:
    """Options for the translate command."""

    input_path: Path
    output_path: Path | None
    source_lang: str
    directives: list[Directive]
    target_lang: str | None
    max_concurrency: int | None
    fail_fast: bool
    json_logs: bool
    verbose: bool


def parse_directive(spec: str) -> Directive:
    """Parse a ``KEY:NEW_KEY:LANG`` directive option.

    ``NEW_KEY`` may be empty; the engine rejects it before any call.

    Raises:
        click.BadParameter: If the option does not have three parts.
    """
    parts = spec.split(":")
    if len(parts) != 3 or not parts[0] or not parts[2]:  # noqa: PLR2004
        msg = f"Expected KEY:NEW_KEY:LANG, got '{spec}'"
        raise click.BadParameter(msg, param_hint="--directive")
    key, new_key, lang = parts
    return Directive(source_key=key, target_key=new_key, target_lang=lang)


def _directive_callback(
    ctx: click.Context,  # noqa: ARG001
    param: click.Parameter,  # noqa: ARG001
    value: tuple[str, ...],
) -> list[Directive]:
    return [parse_directive(v) for v in value]


def _report_failures(result: BatchResult) -> None:
    """Print failed units to stderr."""
    click.echo(f"{len(result.failures)} translation(s) failed:", err=True)
    for failure in result.failures:
        click.echo(
            f"  - record {failure.record_index}, key '{failure.source_key}' "
            f"({failure.source_lang} -> {failure.target_lang}): {failure.error}",
            err=True,
        )


def _execute_translate(options: TranslateOptions) -> None:
    """Run a batch translation for the CLI.

    Exits with EXIT_INPUT_ERROR on unreadable input or a bad directive
    and with EXIT_PARTIAL_FAILURE when any unit failed.
    """
    configure_logging(
        level=logging.DEBUG if options.verbose else logging.INFO,
        json_format=options.json_logs,
    )
    log = logger.bind(component="cli", command="translate")

    try:
        records = load_records(options.input_path)
    except RecordParseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    directives = options.directives
    if not directives and options.target_lang:
        directives = seed_directives(records, options.target_lang)
    if not directives:
        click.echo("Error: give --directive or --target-lang", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    settings = get_settings()
    overrides: dict[str, object] = {}
    if options.max_concurrency is not None:
        overrides["max_concurrency"] = options.max_concurrency
    if options.fail_fast:
        overrides["fail_fast"] = True
    config = settings.translator_config().model_copy(update=overrides)

    engine = create_engine(config)

    try:
        result = engine.translate_batch(records, directives, options.source_lang)
    except DirectiveValidationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_INPUT_ERROR)
    except TranslationFailure as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_PARTIAL_FAILURE)

    if options.output_path:
        write_records(options.output_path, result.records)
        log.info("records_saved", path=str(options.output_path))
    else:
        click.echo(dump_records(result.records), nl=False)

    if not result.success:
        _report_failures(result)
        sys.exit(EXIT_PARTIAL_FAILURE)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Record field translator CLI."""


@cli.command()
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding an array of records.",
)
@click.option(
    "--out",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
@click.option(
    "--source-lang",
    required=True,
    type=str,
    help="Source language code (e.g., az).",
)
@click.option(
    "--directive",
    "directives",
    multiple=True,
    callback=_directive_callback,
    help="KEY:NEW_KEY:LANG, repeatable. Later directives win on key clashes.",
)
@click.option(
    "--target-lang",
    type=str,
    default=None,
    help="When no --directive is given, translate every field of the first "
    "record to this language under KEY_translated.",
)
@click.option(
    "--max-concurrency",
    type=click.IntRange(min=1, max=256),
    default=None,
    help="Maximum parallel translation calls (default: from environment).",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    help="Abort without writing any translation on the first failure.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def translate(  # noqa: PLR0913
    input_path: Path,
    output_path: Path | None,
    source_lang: str,
    directives: list[Directive],
    target_lang: str | None,
    max_concurrency: int | None,
    fail_fast: bool,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Translate selected fields of a record file.

    Directives are validated before any network call.
    """
    options = TranslateOptions(
        input_path=input_path,
        output_path=output_path,
        source_lang=source_lang,
        directives=directives,
        target_lang=target_lang,
        max_concurrency=max_concurrency,
        fail_fast=fail_fast,
        json_logs=json_logs,
        verbose=verbose,
    )
    _execute_translate(options)


@cli.command()
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding an array of records.",
)
@click.option(
    "--target-lang",
    required=True,
    type=str,
    help="Target language for every seeded directive.",
)
@click.option(
    "--suffix",
    default=SEED_SUFFIX,
    show_default=True,
    help="Appended to each key to form the new key.",
)
def directives(input_path: Path, target_lang: str, suffix: str) -> None:
    """Print default directives seeded from the first record's keys."""
    try:
        records = load_records(input_path)
    except RecordParseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    seeded = [
        d.model_dump(by_alias=True)
        for d in seed_directives(records, target_lang, suffix)
    ]
    click.echo(json.dumps(seeded, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
