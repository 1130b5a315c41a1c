"""
Polls a bot's data at a fixed interval until it reaches a terminal status.

There is no backoff or retry limit: a slow provider means polling continues
until the bot finishes or ``stop()`` is called.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from meeting_assistant.services.bot_data import is_terminal

_logger = logging.getLogger(__name__)


class BotWatcher:
    """Daemon-thread polling loop bound to the "bot not yet terminal" predicate."""

    def __init__(
        self,
        fetch: Callable[[], dict],
        *,
        interval: float = 5.0,
        on_update: Optional[Callable[[dict], None]] = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            fetch: Returns the current unified bot record
            interval: Seconds between polls
            on_update: Called with every successfully fetched record
        """
        self._fetch = fetch
        self._interval = interval
        self._on_update = on_update
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.last_record: Optional[dict] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            _logger.warning("BotWatcher already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, name="BotWatcher", daemon=True)
        self._thread.start()
        _logger.info("BotWatcher started, interval=%ss", self._interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        _logger.info("BotWatcher stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until polling ends. Returns False if ``timeout`` expired first."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def poll_once(self) -> bool:
        """Fetch once and report whether polling should stop."""
        try:
            record = self._fetch()
        except Exception as exc:
            _logger.warning("BotWatcher poll failed: %s", exc)
            return False
        self.last_record = record
        if self._on_update is not None:
            try:
                self._on_update(record)
            except Exception as exc:
                _logger.warning("BotWatcher update callback failed: %s", exc)
        status = record.get("status", "unknown")
        if is_terminal(status):
            _logger.info("BotWatcher: terminal status %s reached", status)
            return True
        return False

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            if self.poll_once():
                self._stop_event.set()
                break
            self._stop_event.wait(self._interval)
