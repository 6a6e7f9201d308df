"""CLI for the ``statement_report`` package.

This module exposes callable command handlers (``cmd_columns``,
``cmd_report``) and a Typer-based console interface. Environment variables
are loaded from a local ``.env`` using ``python-dotenv`` before settings are
resolved; explicit command-line flags win over the environment. Business
logic lives in ``statement_report.api`` and the pipeline modules.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .api import load_statement, read_statement_text
from .classifier import RoleError, suggest_roles
from .logging_setup import configure_logging
from .models import ColumnRole
from .session import ImportSession
from .settings import ImportSettings

# ---- Small module-level helpers used by CLI commands -------------------------


def _err(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _resolve_settings(*, has_headers: bool | None, encoding: str | None) -> ImportSettings:
    return ImportSettings.from_env().with_overrides(has_headers=has_headers, encoding=encoding)


def _open_session(file: str, settings: ImportSettings) -> ImportSession:
    text = read_statement_text(file, encoding=settings.encoding)
    return load_statement(text, settings=settings)


def _parse_labels(labels: list[str]) -> dict[int, str]:
    """Parse ``N=NAME`` pairs into a column index -> label mapping."""

    parsed: dict[int, str] = {}
    for item in labels:
        index_text, sep, name = item.partition("=")
        if not sep or not index_text.strip().isdigit() or not name.strip():
            raise RoleError(f"invalid --label {item!r}; expected N=NAME")
        parsed[int(index_text)] = name.strip()
    return parsed


def _apply_flag_roles(
    session: ImportSession,
    *,
    payer: int | None,
    date: int | None,
    amount: int | None,
    labels: dict[int, str],
) -> None:
    # Labels first so an explicit payment flag on the same column wins.
    for index, label in labels.items():
        session.assign_role(index, ColumnRole.common_info(label))
    flagged = (
        (payer, ColumnRole.recipient()),
        (date, ColumnRole.date()),
        (amount, ColumnRole.amount()),
    )
    for index, role in flagged:
        if index is not None:
            session.assign_role(index, role)


def _apply_interactive_roles(session: ImportSession) -> None:
    # Deferred import: prompt_toolkit is only needed for interactive runs.
    from .term_ui import select_column_role

    suggestions = suggest_roles(session.columns)
    for column in session.columns:
        role = select_column_role(column, default=suggestions.get(column.index))
        if role is None:
            session.clear_role(column.index)
        else:
            session.assign_role(column.index, role)


# ---- Command handlers --------------------------------------------------------


def cmd_columns(file: str, *, has_headers: bool | None = None, encoding: str | None = None) -> int:
    """List surviving columns with sample cells and a suggested role.

    Writes one line per column to stdout. Errors go to stderr and the function
    returns a non-zero exit status.
    """

    from .term_ui import describe_column

    try:
        settings = _resolve_settings(has_headers=has_headers, encoding=encoding)
        session = _open_session(file, settings)
    except FileNotFoundError:
        return _err(f"File not found: {file}")
    except PermissionError:
        return _err(f"Permission denied: {file}")
    except UnicodeDecodeError as e:
        return _err(f"Failed to decode '{file}': {e}")
    except ValueError as e:
        return _err(str(e))

    columns = session.columns
    if not columns:
        print("No columns found.")
        return 0
    suggestions = suggest_roles(columns)
    for column in columns:
        print(f"{describe_column(column)}  -> {suggestions[column.index]}")
    return 0


def cmd_report(
    file: str,
    *,
    has_headers: bool | None = None,
    encoding: str | None = None,
    payer: int | None = None,
    date: int | None = None,
    amount: int | None = None,
    labels: list[str] | None = None,
    expand: list[str] | None = None,
    as_json: bool = False,
    interactive: bool = False,
) -> int:
    """Classify columns, assemble rows and print the payer report.

    Roles come from ``payer``/``date``/``amount``/``labels`` or, with
    ``interactive``, from terminal prompts pre-filled with suggestions. Output
    is a text table or, with ``as_json``, the Visualizer payload as JSON.
    """

    from .views import build_payload, render_report

    try:
        settings = _resolve_settings(has_headers=has_headers, encoding=encoding)
        session = _open_session(file, settings)
        if interactive:
            _apply_interactive_roles(session)
        else:
            _apply_flag_roles(
                session,
                payer=payer,
                date=date,
                amount=amount,
                labels=_parse_labels(labels or []),
            )
    except FileNotFoundError:
        return _err(f"File not found: {file}")
    except PermissionError:
        return _err(f"Permission denied: {file}")
    except UnicodeDecodeError as e:
        return _err(f"Failed to decode '{file}': {e}")
    except (KeyboardInterrupt, EOFError):
        return _err("aborted")
    except ValueError as e:
        return _err(str(e))

    if not session.is_complete():
        missing = ", ".join(k.value for k in session.classifier.missing_roles())
        return _err(f"missing column roles: {missing}")

    rows = session.finish()
    dropped = session.dropped
    if dropped:
        print(f"{len(dropped)} rows dropped (unparsable payer, date or amount)", file=sys.stderr)

    expanded = list(expand or [])
    if as_json:
        payload = build_payload(rows.values(), expanded=expanded, dropped_count=len(dropped))
        print(payload.model_dump_json(indent=2))
    else:
        print(render_report(rows.values(), expanded=expanded, dropped_count=len(dropped)))
    return 0


# ---- Typer app -----------------------------------------------------------------

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Turn semicolon-separated bank statement exports into payer reports.",
)

FileArg = Annotated[
    Path,
    typer.Option(
        "--file",
        "-f",
        help="Path to the statement export (CRLF rows, ';' fields).",
        dir_okay=False,
        file_okay=True,
    ),
]
HeadersOpt = Annotated[
    bool | None,
    typer.Option(
        "--has-headers/--no-headers",
        help="Whether the first row holds column headers (default from env, else no).",
    ),
]
EncodingOpt = Annotated[
    str | None, typer.Option(help="Text encoding of the file (default from env, else utf-8).")
]


@app.command("columns")
def columns_cmd(
    file: FileArg,
    has_headers: HeadersOpt = None,
    encoding: EncodingOpt = None,
) -> None:
    """Show the statement's columns with a suggested role for each."""

    raise typer.Exit(cmd_columns(str(file), has_headers=has_headers, encoding=encoding))


@app.command("report")
def report_cmd(
    file: FileArg,
    has_headers: HeadersOpt = None,
    encoding: EncodingOpt = None,
    payer: Annotated[int | None, typer.Option(help="Column index of the payment recipient.")] = None,
    date: Annotated[int | None, typer.Option(help="Column index of the payment date.")] = None,
    amount: Annotated[int | None, typer.Option(help="Column index of the payment amount.")] = None,
    label: Annotated[
        list[str] | None,
        typer.Option(help="Keep a column as extra info under a label: N=NAME (repeatable)."),
    ] = None,
    expand: Annotated[
        list[str] | None,
        typer.Option(help="Payer to break down by year and month (repeatable)."),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit the chart payload as JSON.")] = False,
    interactive: Annotated[
        bool, typer.Option("--interactive", "-i", help="Review each column's role in prompts.")
    ] = False,
) -> None:
    """Assemble payments and print totals per payer."""

    raise typer.Exit(
        cmd_report(
            str(file),
            has_headers=has_headers,
            encoding=encoding,
            payer=payer,
            date=date,
            amount=amount,
            labels=label,
            expand=expand,
            as_json=as_json,
            interactive=interactive,
        )
    )


@app.callback()
def _root(
    log_level: Annotated[
        str | None, typer.Option(help="Log level (default from STATEMENT_REPORT_LOG_LEVEL, else INFO).")
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging from
    ``--log-level`` or the resolved settings.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        settings = ImportSettings.from_env().with_overrides(log_level=log_level)
    except ValueError as e:
        raise typer.Exit(_err(str(e))) from e
    configure_logging(settings.log_level)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["app", "cmd_columns", "cmd_report", "main"]
