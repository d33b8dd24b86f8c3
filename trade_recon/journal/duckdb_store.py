"""
Journal store for persisting trades to DuckDB
"""

import logging
from pathlib import Path
from threading import RLock
from typing import List, Optional, Union

import duckdb

from ..importer.models import Trade
from .notes import JournalNote
from .store import JournalStore

logger = logging.getLogger(__name__)

_TRADE_COLUMNS = [
    'trade_id', 'account', 'date', 'symbol', 'outcome', 'trade_type',
    'entry_time', 'exit_time', 'entry_price', 'exit_price', 'contracts',
    'pl', 'fees', 'model', 'session', 'rr', 'notes', 'followed_plan', 'emotions',
]
_COLUMN_LIST = ', '.join(f'"{column}"' for column in _TRADE_COLUMNS)


class DuckDBJournalStore(JournalStore):
    """
    Per-account trade journal in a DuckDB file

    Each insert commits on its own, so an appended trade is durable once
    append_trade returns. Money columns are DECIMAL so values read back
    compare equal to the imported ones. Trade and note ids are unique
    within an account. Journal notes live in a second table.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        super().__init__()

        if db_path:
            self.db_path = str(db_path)
        else:
            data_dir = Path("data")
            data_dir.mkdir(exist_ok=True)
            self.db_path = str(data_dir / "journal.duckdb")

        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = None
        self._conn_lock = RLock()
        self._connect()
        self._create_tables()

        logger.info(f"DuckDBJournalStore initialized with database: {self.db_path}")

    def _connect(self) -> None:
        try:
            self.conn = duckdb.connect(self.db_path)
        except Exception as e:
            logger.error(f"Failed to connect to journal database: {e}")
            raise

    def _create_tables(self) -> None:
        try:
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS journal_trades_seq")
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS journal_trades (
                    seq BIGINT DEFAULT nextval('journal_trades_seq'),
                    trade_id VARCHAR NOT NULL,
                    account VARCHAR NOT NULL,
                    "date" DATE NOT NULL,
                    symbol VARCHAR NOT NULL,
                    outcome VARCHAR NOT NULL,
                    trade_type VARCHAR NOT NULL,

                    -- Timing (time-of-day strings as exported)
                    entry_time VARCHAR,
                    exit_time VARCHAR,

                    -- Prices and size
                    entry_price DECIMAL(18, 6),
                    exit_price DECIMAL(18, 6),
                    contracts INTEGER,

                    -- Money
                    pl DECIMAL(18, 6),
                    fees DECIMAL(18, 6),

                    -- Journal fields
                    model VARCHAR,
                    "session" VARCHAR,
                    rr DOUBLE,
                    notes TEXT,
                    followed_plan BOOLEAN,
                    emotions VARCHAR,

                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

                    -- Trade ids are unique within an account
                    PRIMARY KEY (account, trade_id)
                )
            """)
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_journal_account ON journal_trades(account)")
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS journal_notes (
                    note_id VARCHAR NOT NULL,
                    account VARCHAR NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    title VARCHAR,
                    content TEXT,
                    image_path VARCHAR,
                    PRIMARY KEY (account, note_id)
                )
            """)
        except Exception as e:
            logger.error(f"Failed to create journal tables: {e}")
            raise

    def _row_params(self, account: str, trade: Trade) -> list:
        return [
            trade.trade_id, account, trade.date, trade.symbol, trade.outcome.value,
            trade.trade_type.value, trade.entry_time, trade.exit_time,
            trade.entry_price, trade.exit_price, trade.contracts,
            trade.pl, trade.fees, trade.model, trade.session, trade.rr,
            trade.notes, trade.followed_plan, trade.emotions,
        ]

    def _exists(self, account: str, trade_id: str) -> bool:
        row = self.conn.execute(
            "SELECT count(*) FROM journal_trades WHERE trade_id = ? AND account = ?",
            [trade_id, account],
        ).fetchone()
        return row[0] > 0

    def get_trades(self, account: str) -> List[Trade]:
        if not account:
            return []

        with self._conn_lock:
            rows = self.conn.execute(
                f"SELECT {_COLUMN_LIST} FROM journal_trades WHERE account = ? ORDER BY seq",
                [account],
            ).fetchall()
        return [Trade.from_dict(dict(zip(_TRADE_COLUMNS, row))) for row in rows]

    def append_trade(self, account: str, trade: Trade) -> None:
        if not account or trade is None:
            return

        placeholders = ', '.join('?' for _ in _TRADE_COLUMNS)
        try:
            with self._conn_lock:
                self.conn.execute(
                    f"INSERT INTO journal_trades ({_COLUMN_LIST}) VALUES ({placeholders})",
                    self._row_params(account, trade),
                )
        except Exception as e:
            logger.error(f"Failed to store trade {trade.trade_id} for {account}: {e}")
            raise

        logger.debug(f"Stored trade: {trade.symbol} {trade.date} {trade.entry_time} -> {account}")

    def update_trade(self, account: str, trade: Trade) -> bool:
        # trade_id and account identify the row and are never rewritten
        assignments = ', '.join(f'"{column}" = ?' for column in _TRADE_COLUMNS[2:])
        params = self._row_params(account, trade)[2:] + [trade.trade_id, account]

        with self._conn_lock:
            if not self._exists(account, trade.trade_id):
                return False
            self.conn.execute(
                f"UPDATE journal_trades SET {assignments} WHERE trade_id = ? AND account = ?",
                params,
            )
        logger.info(f"Updated trade {trade.trade_id} for {account}")
        return True

    def delete_trade(self, account: str, trade_id: str) -> bool:
        with self._conn_lock:
            if not self._exists(account, trade_id):
                return False
            self.conn.execute(
                "DELETE FROM journal_trades WHERE trade_id = ? AND account = ?",
                [trade_id, account],
            )
        logger.info(f"Deleted trade {trade_id} for {account}")
        return True

    def accounts(self) -> List[str]:
        with self._conn_lock:
            rows = self.conn.execute(
                "SELECT account FROM journal_trades GROUP BY account ORDER BY min(seq)"
            ).fetchall()
        return [row[0] for row in rows]

    def get_notes(self, account: str) -> List[JournalNote]:
        if not account:
            return []

        with self._conn_lock:
            rows = self.conn.execute(
                "SELECT note_id, account, created_at, title, content, image_path "
                "FROM journal_notes WHERE account = ? ORDER BY created_at DESC",
                [account],
            ).fetchall()
        columns = ['note_id', 'account', 'created_at', 'title', 'content', 'image_path']
        return [JournalNote.from_dict(dict(zip(columns, row))) for row in rows]

    def save_note(self, account: str, note: JournalNote) -> None:
        if not account or note is None:
            return

        with self._conn_lock:
            exists = self.conn.execute(
                "SELECT count(*) FROM journal_notes WHERE note_id = ? AND account = ?",
                [note.note_id, account],
            ).fetchone()[0] > 0

            if exists:
                # created_at and account stay as first saved
                self.conn.execute(
                    "UPDATE journal_notes SET title = ?, content = ?, image_path = ? "
                    "WHERE note_id = ? AND account = ?",
                    [note.title, note.content, note.image_path, note.note_id, account],
                )
            else:
                note.account = account
                self.conn.execute(
                    "INSERT INTO journal_notes (note_id, account, created_at, title, content, image_path) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    [note.note_id, account, note.created_at, note.title, note.content, note.image_path],
                )
        logger.debug(f"Saved note {note.note_id} for {account}")

    def delete_note(self, account: str, note_id: str) -> bool:
        with self._conn_lock:
            row = self.conn.execute(
                "SELECT count(*) FROM journal_notes WHERE note_id = ? AND account = ?",
                [note_id, account],
            ).fetchone()
            if row[0] == 0:
                return False
            self.conn.execute(
                "DELETE FROM journal_notes WHERE note_id = ? AND account = ?",
                [note_id, account],
            )
        logger.info(f"Deleted note {note_id} for {account}")
        return True

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Journal database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
