"""
Structured JSON event logger for the pairing CLI.

Emits one JSON object per line to stderr. Events are designed to be
parsed by log aggregators (Grafana Loki, CloudWatch, ELK).

Optional webhook: when configured, error events are POSTed to the URL.
"""

from __future__ import annotations

import json
import logging
import sys
import urllib.request
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("fillpair.events")


class StructuredEventLogger:
    """Emit structured JSON events to stderr and optional webhook."""

    def __init__(
        self,
        source: str,
        *,
        enabled: bool = True,
        webhook_url: str = "",
        stream: Any = None,
    ) -> None:
        self._source = source
        self._enabled = enabled
        self._webhook_url = webhook_url.strip()
        self._stream = stream or sys.stderr
        self._ALERT_EVENTS = {"error"}

    def _emit(self, event_type: str, **fields: Any) -> dict:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "source": self._source,
            **fields,
        }
        if self._enabled:
            self._stream.write(json.dumps(record) + "\n")
            self._stream.flush()

        if self._webhook_url and event_type in self._ALERT_EVENTS:
            self._post_webhook(record)

        return record

    def _post_webhook(self, record: dict) -> None:
        try:
            data = json.dumps(record).encode("utf-8")
            req = urllib.request.Request(
                self._webhook_url,
                data=data,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            urllib.request.urlopen(req, timeout=5)
        except Exception as exc:
            logger.warning("Webhook POST failed: %s", exc)

    def import_complete(self, path: str, fills: int, symbols: list[str]) -> dict:
        return self._emit("import_complete", path=path, fills=fills, symbols=symbols)

    def pairs_computed(self, symbol: str, fills: int, closed: int, pending: int) -> dict:
        return self._emit(
            "pairs_computed",
            symbol=symbol,
            fills=fills,
            closed=closed,
            pending=pending,
        )

    def summary_computed(self, symbols: list[str], total_pnl: float, win_rate: float) -> dict:
        return self._emit(
            "summary_computed",
            symbols=symbols,
            total_pnl=round(total_pnl, 8),
            win_rate=round(win_rate, 2),
        )

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)
