"""Fault injection for exercising the orchestrator's retry and timeout paths."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from dayplug.core.config import PluginSettings
from dayplug.core.errors import InjectedFailure

log = logging.getLogger(__name__)


class FaultInjector:
    """Optional latency and random failure ahead of a transfer.

    ``check()`` runs before any I/O, so a triggered failure never leaves a
    partial write behind.
    """

    def __init__(
        self,
        delay_seconds: float = 0.0,
        fail_rate: float = 0.0,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.delay_seconds = delay_seconds
        self.fail_rate = fail_rate
        self._rng = rng or random.Random()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: PluginSettings) -> FaultInjector:
        """Build an injector from ``PluginSettings``."""
        return cls(
            delay_seconds=settings.delay_seconds,
            fail_rate=settings.fail_rate,
            rng=random.Random(settings.seed),
        )

    @property
    def enabled(self) -> bool:
        return self.delay_seconds > 0 or self.fail_rate > 0

    def check(self) -> None:
        """Sleep and/or raise ``InjectedFailure`` according to the settings."""
        if self.delay_seconds > 0:
            log.debug("injecting %.2fs delay", self.delay_seconds)
            self._sleep(self.delay_seconds)
        if self.fail_rate > 0 and self._rng.random() < self.fail_rate:
            log.info("injected failure triggered")
            raise InjectedFailure("fail triggered")
