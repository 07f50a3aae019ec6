"""Processor registry and single dispatch."""

from __future__ import annotations

import builtins
import threading
import time

from loguru import logger

from shellgate.session import Session
from shellgate.types import DispatchResult, Processor, TokenizedCommand


class ProcessorRegistry:
    """Command name to processor mapping.

    The first registration of a name is authoritative. Later registrations of
    the same name are ignored, so lookups never depend on registration order.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._processors: dict[str, Processor] = {}

    def register(self, name: str, processor: Processor) -> bool:
        """Register ``processor`` for ``name``; return False if ``name`` was taken."""

        with self._lock:
            if name in self._processors:
                logger.debug("registry.duplicate name={} ignored={!r}", name, processor)
                return False
            self._processors[name] = processor
        return True

    def unregister(self, name: str) -> Processor | None:
        with self._lock:
            return self._processors.pop(name, None)

    def get(self, name: str) -> Processor | None:
        with self._lock:
            return self._processors.get(name)

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> builtins.list[str]:
        with self._lock:
            return sorted(self._processors)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._processors)

    def dispatch(self, command: TokenizedCommand, session: Session) -> DispatchResult | None:
        """Invoke the processor registered for ``command.name``; ``None`` means no match."""

        if command.name is None:
            return None
        processor = self.get(command.name)
        if processor is None:
            return None

        before = session.contexts.current_context()
        logger.info("processor.call.start name={} args={}", command.name, command.args)
        start = time.monotonic()
        try:
            handled = bool(processor(list(command.args), session))
        finally:
            duration = time.monotonic() - start
            logger.info("processor.call.end name={} duration={:.3f}ms", command.name, duration * 1000)
        after = session.contexts.current_context()
        return DispatchResult(name=command.name, handled=handled, context_before=before, context_after=after)
