"""Self-replacing updates for Python zip applications."""

from __future__ import annotations

from selfswap.services.update import is_up_to_date, update

__all__ = ["is_up_to_date", "update"]
