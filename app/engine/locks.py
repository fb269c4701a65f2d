"""
One scoring write per match at a time.

Reads share the match; a reset excludes them. Readers wait while a reset is
running, and a reset waits for readers already inside to finish.
"""
import logging
import threading
from contextlib import contextmanager

from app.engine.errors import ConcurrentWriteError

logger = logging.getLogger(__name__)


class _MatchGate:
    def __init__(self):
        self.write_lock = threading.Lock()
        self.condition = threading.Condition()
        self.readers = 0
        self.exclusive = False


class MatchLockRegistry:
    def __init__(self):
        self._gates: dict[int, _MatchGate] = {}
        self._guard = threading.Lock()

    def _gate_for(self, match_id: int) -> _MatchGate:
        with self._guard:
            return self._gates.setdefault(match_id, _MatchGate())

    @contextmanager
    def hold(self, match_id: int, exclusive: bool = False):
        """
        Hold the match's write lock; overlapping writers are rejected, not queued.

        With `exclusive`, also wait for in-flight reads to drain and keep new
        reads out until the block exits.
        """
        gate = self._gate_for(match_id)
        if not gate.write_lock.acquire(blocking=False):
            logger.warning("Match %s: rejected overlapping scoring write", match_id)
            raise ConcurrentWriteError(match_id)
        try:
            if not exclusive:
                yield
                return
            with gate.condition:
                gate.exclusive = True
                while gate.readers:
                    gate.condition.wait()
            try:
                yield
            finally:
                with gate.condition:
                    gate.exclusive = False
                    gate.condition.notify_all()
        finally:
            gate.write_lock.release()

    @contextmanager
    def reading(self, match_id: int):
        """Shared access for a multi-query read."""
        gate = self._gate_for(match_id)
        with gate.condition:
            while gate.exclusive:
                gate.condition.wait()
            gate.readers += 1
        try:
            yield
        finally:
            with gate.condition:
                gate.readers -= 1
                gate.condition.notify_all()

    def is_held(self, match_id: int) -> bool:
        return self._gate_for(match_id).write_lock.locked()

    def readers(self, match_id: int) -> int:
        gate = self._gate_for(match_id)
        with gate.condition:
            return gate.readers


match_locks = MatchLockRegistry()
