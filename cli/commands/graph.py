"""Commands for inspecting the site link graph."""

import json
from pathlib import Path
from typing import Optional

import typer

from sitegraph.config import settings
from sitegraph.db import get_connection, init_db
from sitegraph.db.results import require_analysis
from sitegraph.errors import AnalysisNotFoundError, NodeNotFoundError
from sitegraph.graph.focus import neighbours
from sitegraph.graph.memo import GraphMemo
from sitegraph.graph.models import AnalysisResult, GraphNode
from sitegraph.graph.session import GraphSession
from sitegraph.graph.stats import summarize_graph

from cli.commands.analysis import read_analysis_file
from cli.context import load_context
from cli.rendering import render_focus, render_node_detail, render_node_list, render_stats

graph_app = typer.Typer(help="Build and inspect the site link graph.")

_FILE_HELP = "Analysis JSON file. Defaults to the active stored analysis."


def _load_result(file: Optional[Path]) -> AnalysisResult:
    """Read *file*, or the active analysis from the store."""
    if file is not None:
        return read_analysis_file(file)

    ctx = load_context()
    if not ctx.active_analysis_id:
        typer.echo("❌ No active analysis selected.")
        typer.echo("Pass --file or run 'analysis import <file>' first.")
        raise typer.Exit(code=1)

    conn = get_connection()
    init_db(conn)
    try:
        return require_analysis(conn, ctx.active_analysis_id)
    except AnalysisNotFoundError:
        typer.echo(f"❌ Active analysis '{ctx.active_analysis_id}' no longer exists.")
        raise typer.Exit(code=1)
    finally:
        conn.close()


def _session(file: Optional[Path]) -> GraphSession:
    return GraphSession(_load_result(file), memo=GraphMemo(settings))


def _select(session: GraphSession, url: str) -> GraphNode:
    try:
        return session.select(url)
    except NodeNotFoundError:
        typer.echo(f"❌ Page {url!r} is not in the graph.")
        raise typer.Exit(code=1)


@graph_app.command("show")
def graph_show(
    file: Optional[Path] = typer.Option(None, "--file", help=_FILE_HELP),
    focus: Optional[str] = typer.Option(None, "--focus", help="URL of the node to focus on."),
    format: str = typer.Option("summary", "--format", help="Output format: summary | list | json"),
) -> None:
    """Display the link graph, optionally focused on one page."""
    session = _session(file)
    if focus:
        _select(session, focus)
    payload = session.view().payload

    if format == "json":
        typer.echo(json.dumps(payload.to_dict(), indent=2))
    elif format == "list":
        typer.echo(f"Nodes ({len(payload.nodes)}), edges ({len(payload.edges)}):")
        typer.echo(render_node_list(payload))
    elif format == "summary":
        if focus:
            typer.echo(render_focus(payload, focus))
        else:
            stats = summarize_graph(payload, top=settings.top_hubs)
            typer.echo(render_stats(stats))
    else:
        typer.echo(f"❌ Unknown format {format!r}. Use: summary | list | json")
        raise typer.Exit(code=1)


@graph_app.command("node")
def graph_node(
    url: str = typer.Argument(..., help="URL of the page node."),
    file: Optional[Path] = typer.Option(None, "--file", help=_FILE_HELP),
) -> None:
    """Show status, issues and links of one page."""
    session = _session(file)
    node = _select(session, url)

    incoming, outgoing = neighbours(session.base, url)
    typer.echo(render_node_detail(node, incoming, outgoing, session.page_index(url)))


@graph_app.command("stats")
def graph_stats(
    file: Optional[Path] = typer.Option(None, "--file", help=_FILE_HELP),
    top: int = typer.Option(settings.top_hubs, "--top", help="Number of hub pages to list."),
) -> None:
    """Print topological statistics: broken links, orphans, hubs."""
    session = _session(file)
    stats = summarize_graph(session.base, top=top)
    typer.echo(render_stats(stats))
    if stats.orphan_pages:
        typer.echo("\n   Orphan pages:")
        for url in stats.orphan_pages:
            typer.echo(f"    - {url}")
