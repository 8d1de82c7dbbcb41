"""
Parse exchange trade-history exports into Fill records.

JSON: a list of records, or the REST envelope ``{"data": [...]}``. Records
use the exchange's camelCase keys (tradeId, orderId, cTime, feeDetail with
feeCoin/totalFee); snake_case keys are accepted as well.

CSV: header ``trade_id,order_id,symbol,side,price,size,fee_amount,fee_currency,timestamp``.

Numeric fields are passed through as strings; malformed numbers are the
engine's concern (coerced to 0). Structural problems raise FillParseError.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pairing_core.contracts import Fill
from pairing_core.errors import FillParseError

logger = logging.getLogger("fillpair.data")


def _first(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _parse_timestamp(value: Any, trade_id: str) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        raise FillParseError(f"Trade {trade_id}: unparsable timestamp {value!r}") from None


def fill_from_record(record: dict[str, Any]) -> Fill:
    """Build a Fill from one exchange trade-history record."""
    if not isinstance(record, dict):
        raise FillParseError(f"Expected a mapping, got {type(record).__name__}")

    trade_id = _first(record, "tradeId", "trade_id", "id")
    if trade_id is None:
        raise FillParseError(f"Record has no trade id: {record!r}")
    trade_id = str(trade_id)

    side = _first(record, "side")
    if side is None:
        raise FillParseError(f"Trade {trade_id}: missing side")

    fee_detail = record.get("feeDetail")
    if isinstance(fee_detail, dict):
        fee_amount = _first(fee_detail, "totalFee", "fee")
        fee_currency = _first(fee_detail, "feeCoin", "feeCurrency")
    else:
        fee_amount = _first(record, "fee_amount", "feeAmount", "fee")
        fee_currency = _first(record, "fee_currency", "feeCurrency", "feeCoin")

    timestamp = _first(record, "cTime", "timestamp", "ts")
    if timestamp is None:
        raise FillParseError(f"Trade {trade_id}: missing timestamp")

    try:
        return Fill(
            trade_id=trade_id,
            order_id=str(_first(record, "orderId", "order_id") or ""),
            symbol=str(_first(record, "symbol") or "").upper(),
            side=side,
            price=str(_first(record, "price", "priceAvg") or "0"),
            size=str(_first(record, "size", "qty") or "0"),
            timestamp=_parse_timestamp(timestamp, trade_id),
            fee_amount=str(fee_amount) if fee_amount is not None else "0",
            fee_currency=str(fee_currency) if fee_currency is not None else None,
        )
    except ValueError as exc:
        raise FillParseError(str(exc)) from exc


def parse_fills(records: Iterable[dict[str, Any]]) -> list[Fill]:
    return [fill_from_record(r) for r in records]


def load_json_fills(path: str | Path) -> list[Fill]:
    with open(path, encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise FillParseError(f"{path}: not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("data")
        if isinstance(payload, dict):
            payload = payload.get("fillList", payload.get("list"))
    if not isinstance(payload, list):
        raise FillParseError(f"{path}: expected a list of trade records")
    return parse_fills(payload)


def load_csv_fills(path: str | Path) -> list[Fill]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = {"trade_id", "side", "timestamp"} - set(reader.fieldnames or [])
        if missing:
            raise FillParseError(f"{path}: CSV is missing columns {sorted(missing)}")
        return parse_fills(reader)


def load_fills(path: str | Path) -> list[Fill]:
    """Load fills from a .json or .csv export."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Fill file not found: {p}")
    suffix = p.suffix.lower()
    if suffix == ".json":
        fills = load_json_fills(p)
    elif suffix == ".csv":
        fills = load_csv_fills(p)
    else:
        raise FillParseError(f"Unsupported fill file type '{suffix}' (expected .json or .csv)")
    logger.info("Loaded %d fills from %s", len(fills), p)
    return fills
