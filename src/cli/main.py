"""
CLI entry point: fillpair import | pairs | summary | health.

Every command loads config from --config (default config.yaml), reads
fills from the local fill store, and prints human-readable positions.
"""

import logging
import sys
from pathlib import Path
from typing import Callable

import click
from dotenv import load_dotenv

from config import AppConfig, PairingConfig, PairingConfigError, load_config, load_pairing_config
from pairing_core.errors import PairingError

load_dotenv()

logger = logging.getLogger("fillpair")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _events(cfg: AppConfig):
    from cli.structured_log import StructuredEventLogger

    return StructuredEventLogger(
        "fillpair",
        enabled=cfg.alerting.structured_logs,
        webhook_url=cfg.alerting.webhook_url,
    )


def _pairing_config_for(cfg: AppConfig) -> Callable[[str], PairingConfig]:
    """Per-symbol pairing config loader, memoized for one command run."""
    cache: dict[str, PairingConfig] = {}

    def config_for(symbol: str) -> PairingConfig:
        if symbol not in cache:
            cache[symbol] = load_pairing_config(
                cfg.pairing.config_path,
                cfg.pairing.schema_path,
                symbol=symbol,
            )
        return cache[symbol]

    return config_for


def _select_symbols(cfg: AppConfig, store, requested: tuple[str, ...]) -> list[str]:
    if requested:
        return [s.upper() for s in requested]
    if cfg.symbols:
        return list(cfg.symbols)
    return store.symbols()


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """fillpair: rebuild round-trip positions and realized PnL from exchange fills."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- fillpair import ----------


@cli.command("import")
@click.argument("fill_file", type=click.Path(dir_okay=False))
@click.option("--store", "store_override", default=None, help="Override fill store path.")
@click.pass_context
def import_fills(ctx: click.Context, fill_file: str, store_override: str | None) -> None:
    """Load fills from an exchange trade-history export (.json or .csv) into the store."""
    cfg = load_config(ctx.obj["config_path"])
    from data import FillStore, load_fills
    from journal import JournalWriter

    events = _events(cfg)
    try:
        fills = load_fills(fill_file)
    except (FileNotFoundError, PairingError) as exc:
        events.error(message="Fill import failed", detail=str(exc))
        click.echo(f"Import failed: {exc}")
        raise SystemExit(1)

    store_path = store_override or cfg.data.fill_store_path
    store = FillStore(store_path)
    written = store.write_fills(fills)
    symbols = sorted({f.symbol for f in fills})

    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)
    journal.fill_import(str(Path(fill_file)), written, symbols)
    events.import_complete(path=str(fill_file), fills=written, symbols=symbols)

    click.echo(f"Imported {written} fills into {store_path}")
    for symbol in symbols:
        click.echo(f"  {symbol}: {store.count_fills(symbol)} fills in store")


# ---------- fillpair pairs ----------


@cli.command()
@click.option("--symbol", "symbols", multiple=True, help="Symbol(s) to pair. Defaults to config, then all in store.")
@click.option("--moved", "show_moved", is_flag=True, default=False, help="Mark legs filled on a different day than the close.")
@click.option("--journal", "to_journal", is_flag=True, default=False, help="Append each position to the journal.")
@click.pass_context
def pairs(ctx: click.Context, symbols: tuple[str, ...], show_moved: bool, to_journal: bool) -> None:
    """Pair stored fills per symbol and print positions, newest first."""
    cfg = load_config(ctx.obj["config_path"])
    from cli.output import format_positions
    from data import FillStore
    from journal import JournalWriter
    from pairing_core.pairing import TradePairer

    events = _events(cfg)
    store = FillStore(cfg.data.fill_store_path)
    selected = _select_symbols(cfg, store, symbols)
    if not selected:
        click.echo("No fills in store. Run 'fillpair import' first.")
        return

    config_for = _pairing_config_for(cfg)
    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout) if to_journal else None

    for symbol in selected:
        fills = store.get_fills(symbol)
        try:
            pairer = TradePairer(config_for(symbol))
            positions = pairer.pair(fills)
        except (PairingConfigError, PairingError) as exc:
            events.error(message=f"Pairing failed for {symbol}", detail=str(exc))
            click.echo(f"Pairing failed for {symbol}: {exc}")
            raise SystemExit(1)

        closed = sum(1 for p in positions if p.closed)
        events.pairs_computed(symbol=symbol, fills=len(fills), closed=closed, pending=len(positions) - closed)
        click.echo(format_positions(symbol, positions, tz=pairer.config.tz, show_moved=show_moved))
        click.echo("")

        if journal is not None:
            for p in positions:
                journal.position(symbol, p)


# ---------- fillpair summary ----------


@cli.command()
@click.option("--symbol", "symbols", multiple=True, help="Symbol(s) to include. Defaults to config, then all in store.")
@click.option(
    "--period",
    type=click.Choice(["daily", "weekly", "monthly"]),
    default="daily",
    show_default=True,
    help="Bucket size for the PnL table.",
)
@click.pass_context
def summary(ctx: click.Context, symbols: tuple[str, ...], period: str) -> None:
    """Win rate, profit factor, and PnL by period across paired positions."""
    cfg = load_config(ctx.obj["config_path"])
    from cli.output import (
        format_equity_curve,
        format_period_table,
        format_summary,
        format_symbol_performance,
    )
    from data import FillStore
    from pairing_core.pairing import pair_trades_by_symbol
    from pairing_core.performance import equity_curve, pnl_by_period, summarize, symbol_performance

    events = _events(cfg)
    store = FillStore(cfg.data.fill_store_path)
    selected = _select_symbols(cfg, store, symbols)
    if not selected:
        click.echo("No fills in store. Run 'fillpair import' first.")
        return

    fills = [f for symbol in selected for f in store.get_fills(symbol)]
    config_for = _pairing_config_for(cfg)
    try:
        by_symbol = pair_trades_by_symbol(fills, config_for)
        display_tz = load_pairing_config(cfg.pairing.config_path, cfg.pairing.schema_path).tz
    except (PairingConfigError, PairingError) as exc:
        events.error(message="Summary failed", detail=str(exc))
        click.echo(f"Summary failed: {exc}")
        raise SystemExit(1)

    all_positions = [p for positions in by_symbol.values() for p in positions]
    stats = summarize(all_positions)
    events.summary_computed(symbols=selected, total_pnl=stats.total_pnl, win_rate=stats.win_rate)

    click.echo(format_summary(stats))
    click.echo("")
    click.echo(format_period_table(pnl_by_period(all_positions, period, display_tz), period))
    click.echo("")
    click.echo(format_symbol_performance(symbol_performance(by_symbol)))
    click.echo("")
    click.echo(format_equity_curve(equity_curve(all_positions, display_tz)))


# ---------- fillpair health ----------


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check system health: config, pairing config, fill store.

    Exit code 0 = healthy, 1 = unhealthy.
    """
    checks: list[tuple[str, bool, str]] = []

    try:
        cfg = load_config(ctx.obj["config_path"])
        checks.append(("config", True, f"loaded ({len(cfg.symbols)} symbols configured)"))
    except Exception as e:
        checks.append(("config", False, str(e)))
        _print_health(checks)
        raise SystemExit(1)

    try:
        p_cfg = load_pairing_config(cfg.pairing.config_path, cfg.pairing.schema_path)
        checks.append(("pairing_config", True, f"validated (tolerance={p_cfg.tolerance}, tz={p_cfg.display_timezone})"))
    except Exception as e:
        checks.append(("pairing_config", False, str(e)))

    try:
        from data import FillStore

        store = FillStore(cfg.data.fill_store_path)
        count = store.count_fills()
        if count > 0:
            checks.append(("fills", True, f"{count} fills across {len(store.symbols())} symbols"))
        else:
            checks.append(("fills", False, f"no fills in {cfg.data.fill_store_path}"))
    except Exception as e:
        checks.append(("fills", False, str(e)))

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
