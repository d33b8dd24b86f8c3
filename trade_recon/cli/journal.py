"""
Journal import CLI

Commands to preview an execution export, import it into the trade
journal and show journal statistics.

Examples:
    trade-recon preview exports/orders_2024-05-03.csv
    trade-recon import exports/orders_2024-05-03.csv --db data/journal.duckdb
    trade-recon stats FFN-25S951058292787
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import click
import pandas as pd

from ..importer.csv_import import CsvTradeImporter
from ..importer.models import ImportResult
from ..journal.duckdb_store import DuckDBJournalStore
from ..journal.merge import JournalMerger
from ..journal.stats import compute_journal_stats
from ..utils.config import ConfigManager
from ..utils.structured_logging import (
    ImportContext,
    configure_structured_logging,
    get_import_logger,
    import_timer,
)

logger = logging.getLogger(__name__)

PREVIEW_COLUMNS = [
    'date', 'symbol', 'trade_type', 'account', 'entry_time', 'exit_time',
    'entry_price', 'exit_price', 'contracts', 'pl', 'fees', 'outcome', 'notes',
]


def _echo_messages(result: ImportResult) -> None:
    for error in result.errors:
        click.echo(f"ERROR: {error}", err=True)
    for warning in result.warnings:
        click.echo(f"WARNING: {warning}", err=True)


def _echo_summary(result: ImportResult) -> None:
    click.echo(f"Rows parsed: {result.total_rows_parsed}")
    click.echo(f"Trades found: {result.successful_trades}")
    click.echo(f"Errors: {len(result.errors)}  Warnings: {len(result.warnings)}")


def _run_import(ctx: click.Context, csv_file: str) -> ImportResult:
    config_manager: ConfigManager = ctx.obj['config_manager']
    importer = CsvTradeImporter(config_manager.get_importer_config())

    import_logger = get_import_logger(__name__, ImportContext.create(source_file=csv_file))
    with import_timer(import_logger, "csv_import"):
        result = importer.parse_file(csv_file)

    status = 'completed' if result.success else 'failed'
    import_logger.import_event(status, f"Import {status} for {Path(csv_file).name}",
                               rows=result.total_rows_parsed, trades=result.successful_trades,
                               errors=len(result.errors), warnings=len(result.warnings))
    return result


def _open_store(ctx: click.Context, db_path: Optional[str]) -> DuckDBJournalStore:
    config_manager: ConfigManager = ctx.obj['config_manager']
    return DuckDBJournalStore(db_path or config_manager.get_journal_config()['db_path'])


@click.group()
@click.option('--config-dir', default='config', help='Config directory (default: config)')
@click.option('--verbose', '-v', is_flag=True, default=False, help='Verbose output')
@click.option('--json-logs', is_flag=True, default=False, help='Emit JSON log lines')
@click.pass_context
def cli(ctx: click.Context, config_dir: str, verbose: bool, json_logs: bool):
    """Trade journal import tools"""
    config_manager = ConfigManager(config_dir)
    log_config = config_manager.get_logging_config()

    configure_structured_logging(
        log_level='DEBUG' if verbose else log_config.get('level', 'WARNING'),
        log_file=log_config.get('file'),
        json_format=json_logs or bool(log_config.get('json', False)),
    )

    ctx.ensure_object(dict)
    ctx.obj['config_manager'] = config_manager


@cli.command()
@click.argument('csv_file', type=click.Path(dir_okay=False))
@click.pass_context
def preview(ctx: click.Context, csv_file: str):
    """Show the trades an export would produce without importing them"""
    result = _run_import(ctx, csv_file)
    _echo_messages(result)

    if not result.success:
        sys.exit(1)

    _echo_summary(result)
    if result.trades:
        df = result.to_dataframe()[PREVIEW_COLUMNS]
        with pd.option_context('display.max_rows', None, 'display.width', 200):
            click.echo(df.to_string(index=False))


@cli.command(name='import')
@click.argument('csv_file', type=click.Path(dir_okay=False))
@click.option('--db', 'db_path', default=None, help='Journal database path (default: from config)')
@click.option('--account', default=None,
              help='Import every trade into this account instead of each trade\'s own account')
@click.pass_context
def import_command(ctx: click.Context, csv_file: str, db_path: Optional[str], account: Optional[str]):
    """Import an execution export into the trade journal"""
    result = _run_import(ctx, csv_file)
    _echo_messages(result)

    if not result.success:
        sys.exit(1)

    _echo_summary(result)

    with _open_store(ctx, db_path) as store:
        merger = JournalMerger(store)
        if account:
            appended: Dict[str, int] = {account: merger.merge(result.trades, account)}
        else:
            appended = merger.merge_by_account(result.trades)

    merge_logger = get_import_logger(__name__, ImportContext.create(source_file=csv_file))
    for acct, count in appended.items():
        merge_logger.merge_event(acct, count, f"Merged {count} trades into {acct}")
        click.echo(f"{acct}: {count} new trade(s) added")

    total = sum(appended.values())
    click.echo(f"✅ Imported {total} new trade(s) from {result.successful_trades} found")


@cli.command()
@click.argument('account')
@click.option('--db', 'db_path', default=None, help='Journal database path (default: from config)')
@click.pass_context
def stats(ctx: click.Context, account: str, db_path: Optional[str]):
    """Show journal statistics for an account"""
    with _open_store(ctx, db_path) as store:
        trades = store.get_trades(account)

    journal_stats = compute_journal_stats(trades)

    click.echo(f"Journal: {account}")
    click.echo(f"Trades: {journal_stats.total_trades} "
               f"(W {journal_stats.wins} / L {journal_stats.losses} / BE {journal_stats.breakevens})")
    click.echo(f"Win rate: {journal_stats.win_rate:.1f}%")
    click.echo(f"Total P/L: {journal_stats.total_pl:,.2f}")
    click.echo(f"Average P/L: {journal_stats.average_pl:,.2f}")
    click.echo(f"Largest win: {journal_stats.largest_win:,.2f}  Largest loss: {journal_stats.largest_loss:,.2f}")
    click.echo(f"Average win: {journal_stats.average_win:,.2f}  Average loss: {journal_stats.average_loss:,.2f}")


if __name__ == '__main__':
    cli()
