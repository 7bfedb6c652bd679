"""Shared utility helpers."""

from __future__ import annotations

import logging
import math
import sys
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging for the application."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        fmt = (
            '{"time":"%(asctime)s","level":"%(levelname)s",'
            '"logger":"%(name)s","message":"%(message)s"}'
        )
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"

    logging.basicConfig(
        level=numeric_level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    # Silence noisy third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like JavaScript's ``Math.round`` (ties toward +inf).

    Python's ``round`` uses banker's rounding, which would drift from
    historically displayed values.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round2(value: float) -> float:
    return round_half_up(value, 2)


def to_float(value: object) -> float:
    """Parse a string/number upstream field, treating junk as 0."""
    if value is None or value == "":
        return 0.0
    try:
        result = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def format_usd(amount: float) -> str:
    """Compact currency label for log lines (``$1.2m``)."""
    if amount == 0:
        return "$0"
    for threshold, suffix in (
        (1e12, "t"),
        (1e9, "b"),
        (1e6, "m"),
        (1e3, "k"),
    ):
        if abs(amount) >= threshold:
            text = f"{amount / threshold:.1f}"
            if text.endswith(".0"):
                text = text[:-2]
            return f"${text}{suffix}"
    return f"${amount:.0f}"
