"""
Journal store contract

A journal store keeps trades per account. The merge engine needs only
get_trades and append_trade; update and delete by id serve manual edits.
Each store hands out one re-entrant lock per account so a duplicate check
and the appends that follow it run as a single critical section.
Stores also keep free-form journal notes per account.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator, List

from ..importer.models import Trade
from .notes import JournalNote

logger = logging.getLogger(__name__)


class JournalStore(ABC):
    """Base class for per-account trade journals"""

    def __init__(self):
        self._locks: Dict[str, RLock] = {}
        self._locks_guard = Lock()

    @contextmanager
    def account_lock(self, account: str) -> Iterator[None]:
        """Hold the account's lock for the duration of the block"""
        with self._locks_guard:
            lock = self._locks.setdefault(account, RLock())
        with lock:
            yield

    @abstractmethod
    def get_trades(self, account: str) -> List[Trade]:
        """All trades for an account in insertion order"""

    @abstractmethod
    def append_trade(self, account: str, trade: Trade) -> None:
        """Append a trade and persist it before returning"""

    @abstractmethod
    def update_trade(self, account: str, trade: Trade) -> bool:
        """Replace the trade with the same trade_id; False if not found"""

    @abstractmethod
    def delete_trade(self, account: str, trade_id: str) -> bool:
        """Delete a trade by id; False if not found"""

    @abstractmethod
    def accounts(self) -> List[str]:
        """Accounts holding at least one trade"""

    @abstractmethod
    def get_notes(self, account: str) -> List[JournalNote]:
        """Notes for an account, newest first"""

    @abstractmethod
    def save_note(self, account: str, note: JournalNote) -> None:
        """Add a note, or update title, content and image of the note with the same id"""

    @abstractmethod
    def delete_note(self, account: str, note_id: str) -> bool:
        """Delete a note by id; False if not found"""


class InMemoryJournalStore(JournalStore):
    """Journal held in process memory, mainly for tests and previews"""

    def __init__(self):
        super().__init__()
        self._trades: Dict[str, List[Trade]] = {}
        self._notes: Dict[str, List[JournalNote]] = {}

    def get_trades(self, account: str) -> List[Trade]:
        if not account:
            return []
        return list(self._trades.get(account, []))

    def append_trade(self, account: str, trade: Trade) -> None:
        if not account or trade is None:
            return
        self._trades.setdefault(account, []).append(trade)

    def update_trade(self, account: str, trade: Trade) -> bool:
        trades = self._trades.get(account, [])
        for i, existing in enumerate(trades):
            if existing.trade_id == trade.trade_id:
                trades[i] = trade
                return True
        return False

    def delete_trade(self, account: str, trade_id: str) -> bool:
        trades = self._trades.get(account, [])
        for i, existing in enumerate(trades):
            if existing.trade_id == trade_id:
                del trades[i]
                return True
        return False

    def accounts(self) -> List[str]:
        return [account for account, trades in self._trades.items() if trades]

    def get_notes(self, account: str) -> List[JournalNote]:
        if not account:
            return []
        return sorted(self._notes.get(account, []), key=lambda note: note.created_at, reverse=True)

    def save_note(self, account: str, note: JournalNote) -> None:
        if not account or note is None:
            return

        notes = self._notes.setdefault(account, [])
        for existing in notes:
            if existing.note_id == note.note_id:
                existing.title = note.title
                existing.content = note.content
                existing.image_path = note.image_path
                return

        note.account = account
        notes.append(note)

    def delete_note(self, account: str, note_id: str) -> bool:
        notes = self._notes.get(account, [])
        for i, existing in enumerate(notes):
            if existing.note_id == note_id:
                del notes[i]
                return True
        return False
