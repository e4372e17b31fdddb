"""
Main CLI entry point for deeppatch.

Reconciles a state document against a snapshot document and reports what
changed. Both documents are YAML (or JSON).
"""

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import rich.table as _rich_table
import yaml as _yaml

import deeppatch
import deeppatch.api as api
import deeppatch.config as config
import deeppatch.errors as errors
import deeppatch.observable as observable
import deeppatch.yaml_io as yaml_io

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_SUMMARY_WIDTH = 60


def _configure_logging(level: str) -> None:
    """Send deeppatch log records to stderr through rich."""
    logger = _logging.getLogger("deeppatch")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, _rich_logging.RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(
        _rich_logging.RichHandler(
            console=_rich_console.Console(stderr=True),
            show_path=False,
        )
    )


def _summarize(value: _typing.Any) -> str:
    text = repr(yaml_io.to_plain_data(value))
    if len(text) > _SUMMARY_WIDTH:
        return text[: _SUMMARY_WIDTH - 3] + "..."
    return text


def _change_table(changes: list[observable.Change]) -> _rich_table.Table:
    table = _rich_table.Table(title=f"{len(changes)} change(s)")
    table.add_column("#", justify="right")
    table.add_column("Change")
    table.add_column("Key")
    table.add_column("Old")
    table.add_column("New")
    for number, change in enumerate(changes, start=1):
        if change.type is observable.ChangeType.SPLICE:
            old = f"-{len(change.removed)} item(s)" if change.removed else ""
            new = f"+{len(change.added)} item(s)" if change.added else ""
        else:
            old = _summarize(change.old_value) if change.type is not observable.ChangeType.ADD else ""
            new = _summarize(change.new_value) if change.type is not observable.ChangeType.REMOVE else ""
        table.add_row(str(number), change.type.value, repr(change.key), old, new)
    return table


def _load_settings() -> config.Settings:
    try:
        return config.Settings()
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration: {e}") from e


def _load_document(path: _pathlib.Path) -> _typing.Any:
    try:
        return yaml_io.load_path(path)
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"Cannot parse {path}: {e}") from e


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(deeppatch.__version__, "-v", "--version", prog_name="deeppatch")
@_click.pass_context
def cli(ctx: _click.Context) -> None:
    """deeppatch - reconcile tracked tree data against snapshots."""
    settings = _load_settings()
    _configure_logging(settings.log_level)
    ctx.obj = settings


@cli.command()
@_click.argument("state", type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path))
@_click.argument("snapshot", type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path))
@_click.option(
    "--as-map/--no-as-map",
    default=None,
    help="Turn plain mappings below the root into maps.",
)
@_click.option(
    "--property",
    "key",
    type=str,
    default=None,
    help="Reconcile only this top-level key of STATE with the whole SNAPSHOT.",
)
@_click.option(
    "--format",
    "fmt",
    type=_click.Choice(["yaml", "json"]),
    default=None,
    help="Output format of the reconciled document.",
)
@_click.option("--changes/--no-changes", default=None, help="Print the change log to stderr.")
@_click.pass_obj
def apply(
    settings: config.Settings,
    state: _pathlib.Path,
    snapshot: _pathlib.Path,
    as_map: bool | None,
    key: str | None,
    fmt: str | None,
    changes: bool | None,
) -> None:
    """Reconcile STATE against SNAPSHOT and print the result."""
    as_map = settings.as_map if as_map is None else as_map
    fmt = fmt or settings.output_format
    show_changes = settings.show_changes if changes is None else changes

    target = observable.observable(_load_document(state))
    if not (observable.is_observable_object(target) or observable.is_observable_list(target)):
        raise _click.ClickException("STATE must contain a mapping or a list")
    new_data = _load_document(snapshot)

    with observable.record_changes() as recorded:
        try:
            if key is not None:
                member: _typing.Any = key
                if observable.is_observable_list(target):
                    try:
                        member = int(key)
                    except ValueError:
                        raise _click.BadParameter(
                            "must be an integer index when STATE is a list",
                            param_hint="--property",
                        ) from None
                    if member < 0:
                        raise _click.BadParameter(
                            "must be a non-negative index when STATE is a list",
                            param_hint="--property",
                        )
                reconcile_property = (
                    api.reconcile_property_as_map if as_map else api.reconcile_property
                )
                reconcile_property(target, member, new_data)
            else:
                reconcile = api.reconcile_as_map if as_map else api.reconcile
                reconcile(target, new_data)
        except errors.IncompatibleTypeError as e:
            raise _click.ClickException(str(e)) from e

    if show_changes:
        _rich_console.Console(stderr=True).print(_change_table(recorded))
    _click.echo(yaml_io.dump(target, fmt), nl=False)


@cli.command("config")
@_click.pass_obj
def show_config(settings: config.Settings) -> None:
    """Show effective settings."""
    _click.echo(yaml_io.dump(settings.model_dump()), nl=False)


def main() -> None:
    """Entry point for the deeppatch command."""
    cli()
