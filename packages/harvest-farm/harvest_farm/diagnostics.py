"""Warn-once bookkeeping for recoverable definition problems."""
from __future__ import annotations

import logging
from typing import Any


class WarnOnce:
    """Log a warning the first time each key is seen."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._seen: set[str] = set()

    @property
    def seen(self) -> frozenset[str]:
        return frozenset(self._seen)

    def __call__(self, key: str, message: str, *args: Any) -> None:
        if key in self._seen:
            return
        self._seen.add(key)
        self._logger.warning(message, *args)
