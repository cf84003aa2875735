# pdt/cli.py
from __future__ import annotations
import json
import logging
from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import config as cfgmod
from . import timeparse as tparse
from .errors import DateParseError
from .items import parse_items
from .resolver import EPOCH
from .tokens import tokenize

console = Console()
# Show help when no args; disable shell-completion noise
app = typer.Typer(help="Parse GNU date-style expressions", add_completion=False, no_args_is_help=True)

# ---------- global context & config ----------

class Ctx:
    fmt: str
    utc: bool
    boxed: bool

def _load_ctx(fmt_opt: Optional[str], utc_opt: Optional[bool]) -> Ctx:
    cfg = cfgmod.load()
    fmt = cfg["format"]
    if fmt_opt:
        fmt = fmt_opt.strip().lower()
        if fmt not in cfgmod.FORMATS:
            raise typer.BadParameter(f"choose one of {', '.join(cfgmod.FORMATS)}", param_hint="--format")
    ctx = Ctx()
    ctx.fmt = fmt
    ctx.utc = bool(cfg.get("utc")) if utc_opt is None else utc_opt
    ctx.boxed = bool((cfg.get("table") or {}).get("box", True))
    return ctx

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: iso, rfc-3339 or epoch"),
    utc: Optional[bool] = typer.Option(None, "--utc/--local", help="Print results in UTC (default from config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log recognized items to stderr"),
):
    """Load config and flags; print help when no subcommand."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    ctx.obj = _load_ctx(fmt, utc)

# ---------- helpers ----------

def fmt_datetime(dt: datetime, fmt: str, utc: bool = False) -> str:
    if utc:
        dt = dt.astimezone(timezone.utc)
    if fmt == "epoch":
        return str((dt - EPOCH) // timedelta(seconds=1))
    if fmt == "rfc-3339":
        return dt.isoformat(sep=" ", timespec="seconds")
    return dt.isoformat()

def fmt_seconds(td: timedelta) -> str:
    total = int(td.total_seconds())
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    d, rem = divmod(abs(total), 86400)
    h, rem = divmod(rem, 3600)
    m, s = divmod(rem, 60)
    parts = [f"{n}{u}" for n, u in ((d, "d"), (h, "h"), (m, "m"), (s, "s")) if n]
    return sign + " ".join(parts)

def _fail(e: Exception):
    console.print(f"[red]{escape(str(e))}[/red]")
    raise typer.Exit(1)

def _reference(ref: Optional[str]) -> datetime:
    return tparse.parse_datetime(ref) if ref else tparse.now_local()

def _table(c: Ctx) -> Table:
    return Table(box=box.SIMPLE_HEAVY if c.boxed else None)

# ---------- commands ----------

@app.command()
def parse(
    ctx: typer.Context,
    expr: str,
    ref: str = typer.Option(None, "--ref", help="Reference time (itself a date expression; default now)"),
    json_out: bool = typer.Option(False, "--json"),
):
    """Resolve EXPR to an absolute date/time."""
    c: Ctx = ctx.obj
    try:
        dt = tparse.parse_datetime_at(expr, _reference(ref))
    except DateParseError as e:
        _fail(e)
    if json_out:
        typer.echo(json.dumps({
            "input": expr,
            "datetime": fmt_datetime(dt, "iso", c.utc),
            "epoch": int(fmt_datetime(dt, "epoch")),
        }, indent=2))
        return
    typer.echo(fmt_datetime(dt, c.fmt, c.utc))

@app.command()
def relative(
    ctx: typer.Context,
    expr: str,
    ref: str = typer.Option(None, "--ref", help="Anchor for month/year lengths (default now)"),
    json_out: bool = typer.Option(False, "--json"),
):
    """Resolve EXPR to a duration."""
    try:
        td = tparse.parse_relative_time_at(expr, _reference(ref))
    except DateParseError as e:
        _fail(e)
    if json_out:
        typer.echo(json.dumps({"input": expr, "seconds": td.total_seconds(), "human": fmt_seconds(td)}, indent=2))
        return
    typer.echo(fmt_seconds(td))

@app.command()
def add(
    ctx: typer.Context,
    expr: str,
    start: str = typer.Option(..., "--start", help="Start point (any date expression)"),
):
    """Shift --start by the relative expression EXPR."""
    c: Ctx = ctx.obj
    try:
        dt = tparse.add_relative(expr, tparse.parse_datetime(start))
    except DateParseError as e:
        _fail(e)
    typer.echo(fmt_datetime(dt, c.fmt, c.utc))

@app.command()
def items(ctx: typer.Context, expr: str):
    """Show the items EXPR is made of."""
    try:
        frags = parse_items(expr)
    except DateParseError as e:
        _fail(e)
    table = _table(ctx.obj)
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Fields")
    for n, frag in enumerate(frags, 1):
        fields = ", ".join(f"{k}={v}" for k, v in asdict(frag).items() if v is not None)
        table.add_row(str(n), type(frag).__name__, fields)
    console.print(table)

@app.command()
def tokens(ctx: typer.Context, expr: str):
    """Show the tokens of EXPR after normalization."""
    try:
        toks = list(tokenize(expr))
    except DateParseError as e:
        _fail(e)
    table = _table(ctx.obj)
    table.add_column("Pos", justify="right")
    table.add_column("Kind")
    table.add_column("Text")
    for tok in toks:
        table.add_row(str(tok.pos), tok.kind, escape(str(tok)))
    console.print(table)

if __name__ == "__main__":
    app()
