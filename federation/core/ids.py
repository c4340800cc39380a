"""Identifier generation."""

from __future__ import annotations

import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


class IdGenerator:
    """
    Produce ids made of a millisecond time component and a random suffix.

    The time component never repeats or goes backwards inside one process:
    two calls in the same millisecond (or after a clock step back) bump it
    by one, so ids stay unique even if the random part collides.
    """

    def __init__(self, random_length: int = 9) -> None:
        self.random_length = random_length
        self._last_ms = 0
        self._lock = threading.Lock()

    def _tick(self) -> int:
        now_ms = time.time_ns() // 1_000_000
        with self._lock:
            if now_ms <= self._last_ms:
                now_ms = self._last_ms + 1
            self._last_ms = now_ms
        return now_ms

    def new_id(self) -> str:
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(self.random_length))
        return f"{self._tick()}{suffix}"

    __call__ = new_id


_default = IdGenerator()


def generate_id() -> str:
    return _default.new_id()
