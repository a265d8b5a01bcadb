from __future__ import annotations

import logging
from threading import Event
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def spawn(self, fn: Callable[..., Any], *args: Any) -> Any: ...

    def sleep(self, seconds: float) -> None: ...


class RoundTimer:
    """Cancellable once-per-interval countdown driver.

    ``on_tick`` receives the timer and returns ``False`` once the round is over;
    the loop then exits and the timer stays cancelled. The timer owns no game
    state, so all checks against the room happen inside ``on_tick``.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Callable[["RoundTimer"], bool],
        interval: float = 1.0,
        name: str = "",
    ) -> None:
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._interval = interval
        self._cancelled = Event()
        self._started = False
        self.name = name

    @property
    def started(self) -> bool:
        return self._started

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def active(self) -> bool:
        return self._started and not self._cancelled.is_set()

    def start(self) -> bool:
        if self._started or self._cancelled.is_set():
            return False
        self._started = True
        logger.info("[timer-set] room=%s interval=%ss", self.name, self._interval)
        self._scheduler.spawn(self._run)
        return True

    def cancel(self) -> None:
        if not self._cancelled.is_set():
            self._cancelled.set()
            logger.info("[timer-stop] room=%s", self.name)

    def tick(self) -> bool:
        if self._cancelled.is_set():
            return False
        keep_going = self._on_tick(self)
        if not keep_going:
            self.cancel()
        return keep_going

    def _run(self) -> None:
        try:
            while not self._cancelled.is_set():
                self._scheduler.sleep(self._interval)
                if not self.tick():
                    break
        except Exception:
            logger.exception("[timer-error] room=%s", self.name)
            self.cancel()
