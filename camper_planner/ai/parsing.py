"""
Defensive conversion of provider text into an Itinerary.

Two failure kinds are kept apart:
- MalformedJSONError: the text is not a JSON document (usually a truncated response).
  The repair loop reacts to this one.
- MissingFieldError: the JSON parsed but a required key is absent. Repair cannot fix that.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from camper_planner.api.models.schemas import (
    Itinerary,
    ItineraryDay,
    ItineraryStop,
    TravelPeriod,
    TravelPreferences,
)
from camper_planner.core.errors import MissingFieldError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Broccoli Tours - Itinerario"
DEFAULT_STOP_NAME = "Tappa"
DEFAULT_STOP_TYPE = "attraction"
PERIOD_TYPES = {"fixeddates": "FixedDates", "month": "Month", "suggestedbest": "SuggestedBest"}


class MalformedJSONError(ValueError):
    """The text is not a parseable JSON document."""


def remove_code_fences(content: str) -> str:
    """
    Remove a leading ```/```json fence and a trailing ``` fence, if present.

    Whitespace outside the fences is kept: a truncated payload and its
    continuation are concatenated verbatim, and a continuation often starts
    with the space that separates two words of a cut-off string.
    """
    text = content or ""
    opening = text.lstrip()
    if opening.startswith("```"):
        text = opening[3:]
        if text[:4].lower() == "json":
            text = text[4:]
        if text.startswith("\r\n"):
            text = text[2:]
        elif text.startswith("\n"):
            text = text[1:]
    closing = text.rstrip()
    if closing.endswith("```"):
        text = closing[:-3]
        if text.endswith("\r\n"):
            text = text[:-2]
        elif text.endswith("\n"):
            text = text[:-1]
    return text


@dataclass(frozen=True)
class StructureReport:
    depth: int
    in_string: bool

    @property
    def balanced(self) -> bool:
        return self.depth == 0 and not self.in_string


def scan_structure(text: str) -> StructureReport:
    """Track brace/bracket depth and string state across ``text``."""
    depth = 0
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
    return StructureReport(depth=depth, in_string=in_string)


def load_json(text: str) -> Any:
    if not text or not text.strip():
        raise MalformedJSONError("JSON content is empty")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedJSONError(f"{exc.msg} at line {exc.lineno} column {exc.colno} (char {exc.pos})") from exc


# ---------- field readers ----------


def _require(obj: Dict[str, Any], key: str, path: str) -> Any:
    if key not in obj:
        raise MissingFieldError(path)
    return obj[key]


def _str_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value.strip() else default


def _float_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _date_or_none(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _datetime_or_now(value: Any) -> datetime:
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


# ---------- mapping ----------


def _parse_period(raw: Any, preferences: TravelPreferences) -> TravelPeriod:
    if raw is None:
        return TravelPeriod(
            type=preferences.periodType,
            startDate=preferences.startDate,
            endDate=preferences.endDate,
            month=preferences.month,
            year=preferences.year,
        )
    if not isinstance(raw, dict):
        raise MissingFieldError("period")
    type_value = _require(raw, "type", "period.type")
    period_type = PERIOD_TYPES.get(str(type_value).replace("_", "").casefold()) if type_value else None
    return TravelPeriod(
        type=period_type or preferences.periodType,
        startDate=_date_or_none(raw.get("startDate")),
        endDate=_date_or_none(raw.get("endDate")),
        month=_int_or_none(raw.get("month")),
        year=_int_or_none(raw.get("year")),
    )


def _parse_stop(raw: Any, path: str) -> ItineraryStop:
    if not isinstance(raw, dict):
        raise MissingFieldError(path)
    name = _require(raw, "name", f"{path}.name")
    lat = _require(raw, "latitude", f"{path}.latitude")
    lng = _require(raw, "longitude", f"{path}.longitude")
    # Unusable coordinates become (0,0) so coordinate backfill can replace them.
    latitude = _float_or_none(lat)
    longitude = _float_or_none(lng)
    if latitude is None or longitude is None or abs(latitude) > 90 or abs(longitude) > 180:
        latitude, longitude = 0.0, 0.0
    return ItineraryStop(
        name=_text(name, DEFAULT_STOP_NAME),
        description=_str_or_none(raw.get("description")),
        latitude=latitude,
        longitude=longitude,
        type=_text(raw.get("type"), DEFAULT_STOP_TYPE),
    )


def _parse_day(raw: Any, index: int) -> ItineraryDay:
    path = f"days[{index}]"
    if not isinstance(raw, dict):
        raise MissingFieldError(path)
    day_number = _int_or_none(raw.get("dayNumber"))
    if day_number is None:
        day_number = index + 1
    stops_raw = raw.get("stops")
    stops = (
        [_parse_stop(stop, f"{path}.stops[{i}]") for i, stop in enumerate(stops_raw)]
        if isinstance(stops_raw, list)
        else []
    )
    drive_hours = _float_or_none(raw.get("driveHoursEstimate"))
    if drive_hours is not None and drive_hours < 0:
        drive_hours = None
    overnight = _str_or_none(raw.get("overnightStopRecommendation"))
    return ItineraryDay(
        dayNumber=day_number,
        date=_date_or_none(raw.get("date")),
        title=_text(raw.get("title"), f"Giorno {day_number}"),
        stops=stops,
        activities=_string_list(raw.get("activities")),
        driveHoursEstimate=drive_hours,
        overnightStopRecommendation=overnight if overnight and overnight.strip() else None,
    )


def parse_itinerary(text: str, preferences: TravelPreferences) -> Itinerary:
    """
    Parse provider text into an Itinerary.

    Keys that must exist: id, title, period.type and each stop's name/latitude/longitude.
    A required key holding null falls back to a placeholder; a missing one raises
    MissingFieldError. Day numbering is passed through exactly as the provider sent it.
    """
    root = load_json(text)
    if not isinstance(root, dict):
        raise MissingFieldError("$")

    raw_id = _require(root, "id", "id")
    raw_title = _require(root, "title", "title")
    period = _parse_period(_require(root, "period", "period"), preferences)

    days_raw = root.get("days")
    days = [_parse_day(day, i) for i, day in enumerate(days_raw)] if isinstance(days_raw, list) else []

    return Itinerary(
        id=_text(raw_id, f"iti-{uuid4().hex[:12]}"),
        title=_text(raw_title, DEFAULT_TITLE),
        summary=_str_or_none(root.get("summary")) or "",
        period=period,
        days=days,
        tips=_string_list(root.get("tips")),
        generatedAtUtc=_datetime_or_now(root.get("generatedAtUtc")),
    )
