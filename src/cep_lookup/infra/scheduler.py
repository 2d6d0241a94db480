from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None: ...


class TimerScheduler:
    """Executa o callback uma vez, depois de delay_seconds, numa thread daemon."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()


class NoopScheduler:
    """Descarta o callback; para formulários descartáveis que ninguém observa depois."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        pass
