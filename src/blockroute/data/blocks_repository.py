"""Data access helpers for loading and querying festival blocks."""

from __future__ import annotations

import csv
import functools
import json
import logging
import math
import re
import unicodedata
from datetime import date as date_type
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from ..config import settings
from ..models.domain import Block
from ..services.routing.distance import clear_distance_cache

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def parse_time_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` (seconds ignored) into minutes since midnight."""
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Unable to parse time from value '{value}'")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: '{value}'")
    return hours * 60 + minutes


def normalize_search_text(text: str) -> str:
    """Lower-case, accent-free, single-spaced text for matching queries."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(row: Mapping[str, Any], *keys: str) -> str:
    value = _first(row, *keys)
    return str(value).strip() if value is not None else ""


def block_from_record(row: Mapping[str, Any]) -> Optional[Block]:
    """Build an enriched :class:`Block` from a raw record, or ``None`` if unusable."""

    lat = _coerce_float(_first(row, "latitude", "lat"))
    lng = _coerce_float(_first(row, "longitude", "lng", "lon"))
    if lat is None or lng is None:
        return None

    raw_id = _first(row, "id", "block_id")
    day = _text(row, "data", "date")
    start_label = _text(row, "horario", "start_time")
    if raw_id is None or not day or not start_label:
        return None
    try:
        block_id = int(raw_id)
        start_time = parse_time_to_minutes(start_label)
    except ValueError:
        return None

    end_label = _text(row, "horario_fim", "end_time") or None
    end_time: Optional[int] = None
    if end_label:
        try:
            end_time = parse_time_to_minutes(end_label)
        except ValueError:
            end_label = None

    name = _text(row, "nome", "name")
    location = _text(row, "local", "location")
    address = _text(row, "endereco", "address")
    try:
        favorites = int(_first(row, "total_favoritos", "favorites") or 0)
    except (TypeError, ValueError):
        favorites = 0

    return Block(
        id=block_id,
        name=name,
        date=day,
        start_time_label=start_label,
        start_time=start_time,
        lat=lat,
        lng=lng,
        location=location,
        address=address,
        category=_text(row, "categoria_evento", "category"),
        favorites=favorites,
        end_time_label=end_label,
        end_time=end_time,
        searchable_text=normalize_search_text(" ".join((name, location, address))),
    )


def _read_records(path: Path) -> list[Mapping[str, Any]]:
    if path.suffix.lower() == ".csv":
        with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise ValueError(f"Block file '{path}' is missing a header row.")
            return list(reader)

    with path.open(mode="r", encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Block file '{path}' is not valid JSON: {exc}") from exc
    if isinstance(document, dict):
        document = document.get("blocks", document.get("data"))
    if not isinstance(document, list):
        raise ValueError(f"Block file '{path}' must contain a list of records.")
    return [record for record in document if isinstance(record, Mapping)]


@functools.lru_cache(maxsize=1)
def load_blocks(source: Optional[Path] = None) -> tuple[Block, ...]:
    """Load blocks from the configured file, skipping unusable records."""

    path = source or settings.blocks_file
    if not path.exists():
        raise FileNotFoundError(f"Block file not found: {path}")

    records = _read_records(path)
    blocks: list[Block] = []
    seen: set[int] = set()
    for record in records:
        block = block_from_record(record)
        if block is None:
            continue
        if block.id in seen:
            logger.warning(f"Duplicate block id {block.id} in {path.name}; keeping the first record")
            continue
        seen.add(block.id)
        blocks.append(block)

    skipped = len(records) - len(blocks)
    if skipped:
        logger.warning(f"Skipped {skipped} block records without usable id, date, time or coordinates")
    logger.info(f"Loaded {len(blocks)} valid blocks of {len(records)} total from {path.name}")
    return tuple(blocks)


@functools.lru_cache(maxsize=1)
def _block_index(source: Optional[Path] = None) -> dict[int, Block]:
    return {block.id: block for block in load_blocks(source)}


def get_block(block_id: int, source: Optional[Path] = None) -> Optional[Block]:
    return _block_index(source).get(block_id)


def iter_blocks_for_date(day: str, source: Optional[Path] = None) -> Iterator[Block]:
    for block in load_blocks(source):
        if block.date == day:
            yield block


def get_blocks_for_date(day: str, source: Optional[Path] = None) -> tuple[Block, ...]:
    return tuple(iter_blocks_for_date(day, source))


def search_blocks(query: str, day: Optional[str] = None, source: Optional[Path] = None) -> list[Block]:
    """Blocks whose name, location or address contain every query token.

    An empty query matches everything. Results are ordered by start time.
    """
    tokens = normalize_search_text(query).split()
    pool = get_blocks_for_date(day, source) if day else load_blocks(source)
    matches = [b for b in pool if all(token in b.searchable_text for token in tokens)]
    return sorted(matches, key=lambda b: (b.date, b.start_time, b.id))


def _today_string(today: Optional[date_type] = None) -> str:
    return (today or date_type.today()).isoformat()


def available_dates(today: Optional[date_type] = None, source: Optional[Path] = None) -> list[str]:
    """Distinct block dates from today onward; today is always listed."""
    today_str = _today_string(today)
    dates = {block.date for block in load_blocks(source) if block.date >= today_str}
    dates.add(today_str)
    return sorted(dates)


def default_date(today: Optional[date_type] = None, source: Optional[Path] = None) -> str:
    """First date from today onward that has blocks, else today."""
    today_str = _today_string(today)
    upcoming = sorted({block.date for block in load_blocks(source) if block.date >= today_str})
    return upcoming[0] if upcoming else today_str


def clear_block_caches() -> None:
    load_blocks.cache_clear()
    _block_index.cache_clear()


def set_active_blocks_file(path: Path) -> None:
    """Point the loader at a new block file and drop everything derived from the old one."""

    settings.blocks_file = path
    clear_block_caches()
    clear_distance_cache()
