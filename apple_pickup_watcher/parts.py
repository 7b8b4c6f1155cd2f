"""Resolve command-line selectors into a watch query."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import Config
from .exceptions import ConfigurationError
from .models import Carrier, Query

logger = logging.getLogger(__name__)

DEFAULT_PARTS_FILE = Path(__file__).with_name("part_numbers.json")

PartTable = Dict[str, Dict[str, Dict[str, Dict[str, str]]]]


def load_part_numbers(path: Optional[Union[str, Path]] = None) -> PartTable:
    parts_file = Path(path) if path else DEFAULT_PARTS_FILE
    try:
        with parts_file.open(encoding="utf-8") as handle:
            table: Any = json.load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read part number table {parts_file}", cause=exc) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Part number table {parts_file} is not valid JSON", cause=exc) from exc
    if not isinstance(table, dict):
        raise ConfigurationError(f"Part number table {parts_file} must be a JSON object")
    return table


def _normalize_storage(storage: str) -> str:
    value = str(storage).strip().lower()
    if value.endswith("gb"):
        value = value[:-2].strip()
    return value


def _lookup(mapping: Any, key: str, *, case_insensitive: bool = True) -> Any:
    if not isinstance(mapping, dict):
        return None
    if key in mapping:
        return mapping[key]
    if case_insensitive:
        for candidate, value in mapping.items():
            if candidate.lower() == key.lower():
                return value
    return None


def resolve_part_number(
    model: str,
    carrier: Union[str, Carrier],
    color: str,
    storage: str,
    table: Optional[PartTable] = None,
) -> str:
    """Return the part number for a model/carrier/color/storage combination.

    Raises ConfigurationError naming the first selector that has no entry.
    """
    table = table if table is not None else load_part_numbers()
    carrier = carrier if isinstance(carrier, Carrier) else Carrier.parse(carrier)

    by_carrier = _lookup(table, model.strip())
    if by_carrier is None:
        raise ConfigurationError(f"Unknown model {model!r}")
    by_color = _lookup(by_carrier, carrier.value)
    if by_color is None:
        raise ConfigurationError(f"Model {model!r} is not sold for carrier {carrier.value}")
    by_storage = _lookup(by_color, color.strip())
    if by_storage is None:
        raise ConfigurationError(f"Unknown color {color!r} for model {model!r} on {carrier.value}")
    part_number = _lookup(by_storage, _normalize_storage(storage))
    if not part_number:
        raise ConfigurationError(
            f"No part number for {model}/{carrier.value}/{color}/{storage}"
        )
    return str(part_number)


def build_query(
    zip_code: str,
    model: str = "x",
    carrier: Union[str, Carrier] = Carrier.TMOBILE,
    color: str = "gray",
    storage: str = "256",
    max_distance: Optional[float] = None,
    poll_interval: Optional[float] = None,
    parts_file: Optional[Union[str, Path]] = None,
    endpoint: Optional[str] = None,
) -> Query:
    carrier = carrier if isinstance(carrier, Carrier) else Carrier.parse(carrier)
    table = load_part_numbers(parts_file)
    part_number = resolve_part_number(model, carrier, color, storage, table)
    query = Query(
        endpoint=endpoint or Config.PICKUP_ENDPOINT,
        carrier=carrier,
        zip_code=str(zip_code).strip() if zip_code else "",
        part_number=part_number,
        max_distance=max_distance,
        poll_interval=poll_interval if poll_interval is not None else Config.POLL_DELAY,
    )
    logger.debug("Resolved %s/%s/%s/%s to part %s", model, carrier.value, color, storage, part_number)
    return query
