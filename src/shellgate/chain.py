"""Ordered preprocessor chain."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from shellgate.session import Session
from shellgate.types import Abort, ChainResult, Continue, Preprocessor


@dataclass(frozen=True)
class ChainEntry:
    """One named step of the chain."""

    name: str
    step: Preprocessor


class PreprocessorChain:
    """Left fold of rewrite steps over one command string.

    The entry list is operator-mutable between runs. Each run folds over a
    snapshot taken under the lock, so a mutation is seen by the next run.
    """

    def __init__(self, entries: Iterable[ChainEntry] = ()) -> None:
        self._lock = threading.RLock()
        self._entries: list[ChainEntry] = list(entries)

    def entries(self) -> list[ChainEntry]:
        with self._lock:
            return list(self._entries)

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self.names()

    def append(self, name: str, step: Preprocessor) -> None:
        with self._lock:
            self._entries.append(ChainEntry(name, step))

    def insert(self, index: int, name: str, step: Preprocessor) -> None:
        with self._lock:
            self._entries.insert(index, ChainEntry(name, step))

    def remove(self, name: str) -> bool:
        """Remove the first entry called ``name``; return whether one existed."""

        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.name == name:
                    del self._entries[index]
                    return True
        return False

    def move(self, name: str, index: int) -> None:
        with self._lock:
            position = self._index_of(name)
            entry = self._entries.pop(position)
            self._entries.insert(index, entry)

    def replace(self, entries: Iterable[ChainEntry]) -> None:
        new_entries = list(entries)
        with self._lock:
            self._entries = new_entries

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def run(self, command: str, session: Session) -> ChainResult:
        text = command
        for entry in self.entries():
            try:
                result = entry.step(text, session)
            except Exception as exc:
                logger.opt(exception=True).warning("chain.step.error step={} label={}", entry.name, session.label)
                return Abort(step=entry.name, reason=f"{entry.name}: {exc!s}")
            if not result:
                logger.debug("chain.aborted step={} command={}", entry.name, text)
                return Abort(step=entry.name)
            text = result
        return Continue(text)

    def _index_of(self, name: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.name == name:
                return index
        raise KeyError(name)
