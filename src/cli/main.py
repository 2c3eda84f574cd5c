"""
CLI entry point: grid run | tick | levels | replay | health.

Every command loads config from --config (default config.yaml) and prints
human-readable state. Orders and fills go to the journal.
"""

import logging
import sys

import click
from dotenv import load_dotenv

from config import load_config
from grid_core.errors import GridEngineError

load_dotenv()

logger = logging.getLogger("grid")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _load(ctx: click.Context):
    try:
        return load_config(ctx.obj["config_path"])
    except (FileNotFoundError, GridEngineError) as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file (YAML or JSON).")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """grid-engine: simulated grid trading with position and risk tracking."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- grid run ----------


@cli.command()
@click.option("--ticks", "max_ticks", default=None, type=int, help="Stop after N ticks (default: run until Ctrl+C).")
@click.pass_context
def run(ctx: click.Context, max_ticks: int | None) -> None:
    """Poll the price every update_interval_seconds and trade the grid."""
    cfg = _load(ctx)
    from cli.scheduler import build_engine, run_loop
    from cli.structured_log import StructuredEventLogger
    from data import get_price_source
    from execution import PaperExecutor
    from journal import JournalWriter

    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)
    events = StructuredEventLogger(
        cfg.symbol,
        enabled=cfg.alerting.structured_logs,
        webhook_url=cfg.alerting.webhook_url,
    )
    try:
        engine = build_engine(
            cfg,
            get_price_source(cfg),
            fill_model=PaperExecutor(cfg.symbol, journal=journal),
            events=events,
            journal=journal,
        )
    except GridEngineError as exc:
        raise click.ClickException(str(exc)) from exc
    run_loop(cfg, engine, events=events, max_ticks=max_ticks)


# ---------- grid tick ----------


@cli.command()
@click.option("--price", default=None, type=float, help="Use this price instead of querying the price source.")
@click.pass_context
def tick(ctx: click.Context, price: float | None) -> None:
    """Run a single tick and show active orders and trading statistics."""
    cfg = _load(ctx)
    from cli.output import format_tick_report
    from cli.scheduler import build_engine
    from data import StaticPriceSource, get_price_source
    from execution import PaperExecutor
    from journal import JournalWriter

    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)
    try:
        source = StaticPriceSource(price) if price is not None else get_price_source(cfg)
        engine = build_engine(cfg, source, fill_model=PaperExecutor(cfg.symbol, journal=journal), journal=journal)
        report = engine.tick()
    except GridEngineError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(format_tick_report(report))


# ---------- grid levels ----------


@cli.command()
@click.option("--price", required=True, type=float, help="Price to centre the grid on.")
@click.pass_context
def levels(ctx: click.Context, price: float) -> None:
    """Print the grid ladder the engine would use at PRICE."""
    cfg = _load(ctx)
    from cli.output import format_levels
    from grid_core.planner import base_index, compute_grid, level_at

    try:
        grid = compute_grid(price, cfg.grid.spacing, cfg.grid.count)
        base = level_at(base_index(price, cfg.grid.spacing), cfg.grid.spacing)
    except GridEngineError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(format_levels(grid, base, price))


# ---------- grid replay ----------


@cli.command()
@click.argument("prices_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--verbose", is_flag=True, default=False, help="Print every tick report.")
@click.pass_context
def replay(ctx: click.Context, prices_file: str, verbose: bool) -> None:
    """Replay a recorded price series (one price per line, or CSV with a 'price' column)."""
    cfg = _load(ctx)
    from backtest import run_replay
    from cli.output import format_replay_summary, format_tick_report
    from cli.scheduler import build_risk, build_settings
    from data import load_prices

    try:
        prices = load_prices(prices_file)
        if not prices:
            click.echo("No prices in file.")
            return
        result = run_replay(prices, build_settings(cfg), build_risk(cfg), keep_reports=verbose)
    except GridEngineError as exc:
        raise click.ClickException(str(exc)) from exc

    if verbose:
        for report in result.reports:
            click.echo(format_tick_report(report))
            click.echo("")
    click.echo(format_replay_summary(result))


# ---------- grid health ----------


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check config validity and price source reachability.

    Exit code 0 = healthy, 1 = unhealthy.
    """
    checks: list[tuple[str, bool, str]] = []

    try:
        cfg = load_config(ctx.obj["config_path"])
        checks.append(("config", True, f"loaded ({cfg.symbol}, spacing {cfg.grid.spacing:g}, count {cfg.grid.count})"))
    except Exception as e:
        checks.append(("config", False, str(e)))
        _print_health(checks)
        raise SystemExit(1)

    try:
        from cli.scheduler import build_risk, build_settings
        build_settings(cfg)
        build_risk(cfg)
        checks.append(("engine", True, "grid and risk settings valid"))
    except GridEngineError as e:
        checks.append(("engine", False, str(e)))

    try:
        from data import get_price_source
        price = get_price_source(cfg).get_price(cfg.symbol)
        checks.append(("price_source", True, f"{cfg.symbol} = {price}"))
    except GridEngineError as e:
        checks.append(("price_source", False, str(e)))

    _print_health(checks)
    healthy = all(ok for _, ok, _ in checks)
    raise SystemExit(0 if healthy else 1)


def _print_health(checks: list[tuple[str, bool, str]]) -> None:
    for name, ok, detail in checks:
        status = "OK" if ok else "FAIL"
        click.echo(f"  [{status}] {name}: {detail}")
    healthy = all(ok for _, ok, _ in checks)
    click.echo(f"\nHealth: {'HEALTHY' if healthy else 'UNHEALTHY'}")


if __name__ == "__main__":
    cli()
