"""Commands for importing and selecting stored crawl results."""

import json
from pathlib import Path
from typing import Optional

import typer

from sitegraph.db import get_connection, init_db
from sitegraph.db.results import (
    delete_analysis,
    get_analysis_info,
    list_analyses,
    save_analysis,
)
from sitegraph.errors import InvalidAnalysisError
from sitegraph.graph.models import AnalysisResult
from cli.context import clear_context, load_context, require_context, save_context

analysis_app = typer.Typer(help="Import and select crawl/audit results.")


def read_analysis_file(path: Path) -> AnalysisResult:
    """Parse a JSON analysis export, exiting with code 1 on bad input."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return AnalysisResult.from_dict(raw)
    except OSError as exc:
        typer.echo(f"❌ Cannot read {path}: {exc}")
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, InvalidAnalysisError) as exc:
        typer.echo(f"❌ Invalid analysis file {path}: {exc}")
        raise typer.Exit(code=1)


@analysis_app.command("import")
def analysis_import(
    path: Path = typer.Argument(..., help="JSON export of a crawl/audit result."),
    analysis_id: Optional[str] = typer.Option(None, "--id", help="Explicit analysis ID."),
) -> None:
    """Store an analysis result and make it the active one."""
    result = read_analysis_file(path)
    conn = get_connection()
    init_db(conn)

    try:
        aid = save_analysis(conn, result, analysis_id=analysis_id)
        typer.echo(
            f"✅ Imported analysis {aid}: {len(result.pages)} pages, {len(result.issues)} issues"
        )

        ctx = load_context()
        ctx.active_analysis_id = aid
        ctx.active_analysis_url = result.url
        save_context(ctx)
    finally:
        conn.close()


@analysis_app.command("list")
def analysis_list() -> None:
    """List all stored analyses."""
    conn = get_connection()
    init_db(conn)

    try:
        analyses = list_analyses(conn)
        if not analyses:
            typer.echo("No analyses found.")
            return

        active_id = load_context().active_analysis_id
        typer.echo("Analyses:")
        for a in analyses:
            marker = "*" if a.id == active_id else " "
            typer.echo(
                f"{marker} {a.id} \t{a.url or '(no url)'} \tpages={a.page_count} issues={a.issue_count}"
            )
    finally:
        conn.close()


@analysis_app.command("use")
def analysis_use(
    analysis_id: str = typer.Argument(..., help="Analysis ID."),
) -> None:
    """Switch the active analysis."""
    conn = get_connection()
    init_db(conn)

    try:
        info = get_analysis_info(conn, analysis_id)
        if info is None:
            typer.echo(f"❌ Analysis '{analysis_id}' not found.")
            raise typer.Exit(code=1)

        ctx = load_context()
        ctx.active_analysis_id = info.id
        ctx.active_analysis_url = info.url
        save_context(ctx)
        typer.echo(f"📂 Switched to analysis: {info.id}")
    finally:
        conn.close()


@analysis_app.command("status")
@require_context
def analysis_status() -> None:
    """Show the active analysis."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        info = get_analysis_info(conn, ctx.active_analysis_id)
        if info is None:
            typer.echo(f"❌ Active analysis '{ctx.active_analysis_id}' no longer exists.")
            raise typer.Exit(code=1)
        typer.echo(f"Active analysis: {info.id}")
        typer.echo(f"   URL    : {info.url or '(no url)'}")
        typer.echo(f"   Pages  : {info.page_count}")
        typer.echo(f"   Issues : {info.issue_count}")
    finally:
        conn.close()


@analysis_app.command("delete")
def analysis_delete(
    analysis_id: str = typer.Argument(..., help="Analysis ID."),
) -> None:
    """Delete a stored analysis."""
    conn = get_connection()
    init_db(conn)

    try:
        if not delete_analysis(conn, analysis_id):
            typer.echo(f"❌ Analysis '{analysis_id}' not found.")
            raise typer.Exit(code=1)

        ctx = load_context()
        if ctx.active_analysis_id == analysis_id:
            clear_context()
        typer.echo(f"🗑️  Deleted analysis {analysis_id}")
    finally:
        conn.close()
