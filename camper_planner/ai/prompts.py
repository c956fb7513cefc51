"""Prompt templates for itinerary generation and truncated-JSON repair."""

from __future__ import annotations

from typing import List, Optional

from camper_planner.api.models.schemas import Location, RentalLocation, TravelPreferences

LARGE_CATEGORIES = {"Motorhome", "Integrated"}

SYSTEM_PROMPT = (
    "You are the AI planner of Broccoli Tours, a tour operator specialised in camper and motorhome trips. "
    "Always answer with valid JSON only: no markdown, no explanations outside the JSON. "
    "The JSON must follow the requested schema exactly. "
    "All descriptive text (titles, descriptions, activities, tips) must be in Italian. "
    "Be practical: roads, parking and camper stops, overtourism avoidance, real operational advice."
)

REPAIR_SYSTEM_PROMPT = (
    "You complete truncated JSON documents. "
    "Reply with the missing continuation only: no markdown, no commentary, no repeated text."
)

ITINERARY_SCHEMA = """{
    "id": "string",
    "title": "string",
    "summary": "string",
    "period": {
        "type": "FixedDates|Month|SuggestedBest",
        "startDate": "YYYY-MM-DD or null",
        "endDate": "YYYY-MM-DD or null",
        "month": "number or null",
        "year": "number or null"
    },
    "days": [
        {
            "dayNumber": 1,
            "date": "YYYY-MM-DD or null",
            "title": "string",
            "stops": [
                { "name": "string", "description": "string or null", "latitude": 0.0, "longitude": 0.0, "type": "viewpoint|village|camper_area|attraction|food" }
            ],
            "activities": ["string"],
            "driveHoursEstimate": 0.0,
            "overnightStopRecommendation": "string or null"
        }
    ],
    "tips": ["string"],
    "generatedAtUtc": "ISO-8601"
}"""


def suggests_period(preferences: TravelPreferences) -> bool:
    """A Month request with suggestBestPeriod set treats the month as a hint only."""
    if preferences.periodType == "Month":
        return preferences.suggestBestPeriod
    return preferences.periodType == "SuggestedBest"


def describe_period(preferences: TravelPreferences) -> str:
    if preferences.periodType == "FixedDates":
        start = preferences.startDate.isoformat() if preferences.startDate else "unknown"
        end = preferences.endDate.isoformat() if preferences.endDate else "unknown"
        return f"fixed dates {start} to {end}"
    if not suggests_period(preferences):
        return f"month {_month_label(preferences)}"
    if preferences.month or preferences.year:
        return f"suggest the best period (month hint {_month_label(preferences)})"
    return "suggest the best period of the year for this destination"


def _month_label(preferences: TravelPreferences) -> str:
    year = preferences.year if preferences.year is not None else "----"
    month = f"{preferences.month:02d}" if preferences.month is not None else "--"
    return f"{year}-{month}"


def duration_hint(preferences: TravelPreferences) -> str:
    if preferences.tripDurationDays:
        days = preferences.tripDurationDays
        return f"exactly {days} days: generate exactly {days} entries in \"days\""
    if preferences.periodType == "FixedDates" and preferences.startDate and preferences.endDate:
        days = (preferences.endDate - preferences.startDate).days + 1
        if days > 0:
            return f"{days} days, one entry in \"days\" per calendar day"
    if preferences.weekendTrip:
        return "2-3 days (weekend)"
    return "choose a sensible length between 3 and 7 days"


def driving_rule(preferences: TravelPreferences) -> str:
    low, high = preferences.minDailyDriveHours, preferences.maxDailyDriveHours
    if preferences.weekendTrip:
        rule = "Short driving: max ~1.5-2 hours per day, few but memorable stops."
        if high is not None:
            rule += f" Never exceed {_hours(min(high, 2.0))} hours of driving in a day."
        return rule
    if low is not None or high is not None:
        lower = _hours(low) if low is not None else "0"
        upper = _hours(high) if high is not None else "4"
        return (
            f"Driving between {lower} and {upper} hours per day as requested by the traveller; "
            "prefer 2-3 key stops over 6 micro-stops."
        )
    if (preferences.tripDurationDays or 0) >= 10:
        return (
            "Long trip: max ~3-4 hours of driving per day, with a rest day (0-1 hours) "
            "every 3-4 days; one longer transfer day up to ~5 hours is acceptable."
        )
    return "Balanced driving: max ~3-4 hours per day; prefer 2-3 key stops over 6 micro-stops."


def _hours(value: float) -> str:
    return f"{value:g}"


def is_large_vehicle(preferences: TravelPreferences) -> bool:
    return preferences.camperCategory in LARGE_CATEGORIES


def vehicle_size_rule(preferences: TravelPreferences) -> str:
    if is_large_vehicle(preferences):
        return (
            "The vehicle is large: avoid narrow historic centres, very steep passes and unpaved roads; "
            "prefer wide parking areas and easy access."
        )
    return "The vehicle is compact: narrower scenic roads are fine, always with care and an alternative route."


def overtourism_rule(preferences: TravelPreferences) -> str:
    level = preferences.overtourismLevel
    if level >= 5:
        return (
            "Overtourism avoidance (maximum): skip the famous hotspots entirely; propose lesser-known "
            "alternatives within 15-30 minutes and visits at early morning or late afternoon."
        )
    if level == 4:
        return (
            "Overtourism avoidance (high): propose less crowded alternatives within 15-30 minutes of the "
            "well-known sights and suggest smart time slots (early morning / late afternoon)."
        )
    if level == 3:
        return (
            "Overtourism avoidance (moderate): balance iconic sights with quieter places and visit "
            "the busiest ones outside peak hours."
        )
    return "Still choose sustainable stops and practical advice to avoid congestion."


def vehicle_context(preferences: TravelPreferences, rental_location: Optional[RentalLocation]) -> str:
    if preferences.isOwnedCamper:
        model = preferences.vehicle_model or "unspecified"
        return (
            f"Owned vehicle: {model}. Check accessibility for this model (height, length, weight) "
            "on roads, parking areas and camper stops, and point out any limits."
        )
    if rental_location is not None:
        model = preferences.vehicle_model or "unspecified"
        return (
            f"Rental vehicle: {model}, picked up at {rental_location.name} - {rental_location.address}, "
            f"{rental_location.city} ({rental_location.country}), coordinates "
            f"{rental_location.latitude},{rental_location.longitude}.\n"
            "- MANDATORY: day 1 starts at the rental site and the last day ends there (round trip).\n"
            "- Plan 1-2 hours less driving on the first and last day for pickup and drop-off."
        )
    category = preferences.camperCategory or "any camper"
    model = preferences.vehicle_model or "unspecified"
    return f"Camper: category {category}, model {model}."


def build_itinerary_prompt(
    preferences: TravelPreferences,
    location: Optional[Location],
    rental_location: Optional[RentalLocation] = None,
) -> str:
    """Render the full instruction for one itinerary. Pure function of its inputs."""
    if location is not None:
        destination = f"{location.name} ({location.region or location.countryCode})"
        coords = f"approx. coordinates {location.latitude},{location.longitude}"
    else:
        destination = preferences.locationQuery or "Italia"
        coords = "coordinates to be determined"

    lines: List[str] = [
        "Design a TOUR OPERATOR style camper itinerary for Broccoli Tours.",
        "",
        "Traveller constraints:",
        f"- Destination (anchor): {destination}, {coords}",
        f"- Period: {describe_period(preferences)}",
        f"- Trip length: {duration_hint(preferences)}",
        f"- Weekend trip: {'yes' if preferences.weekendTrip else 'no'}",
        f"- Overtourism avoidance level: {preferences.overtourismLevel}/5",
        f"- Party size: {preferences.partySize}",
        f"- {vehicle_context(preferences, rental_location)}",
        "",
        "Quality rules (mandatory):",
        f"- {driving_rule(preferences)}",
        f"- {vehicle_size_rule(preferences)}",
        f"- {overtourism_rule(preferences)}",
        '- ALWAYS include at least 1 stop of type "camper_area" on every day (practical camper stop or campsite), with a useful description.',
        '- Include at least 1 off-route gem (type "village" or "viewpoint") and at least 1 "food" stop (market, trattoria, local farm) in the whole itinerary.',
        "- Coordinates: every stop must have realistic latitude/longitude (never 0,0).",
        "- dayNumber is sequential (1..N). If dates are not known, use null.",
        "- driveHoursEstimate: total driving hours for that day (e.g. 2.5 or 3.0 on a normal trip, 1.5 on a weekend; 0.0 on a stationary day).",
        "- overnightStopRecommendation: recommended camper stop or campsite for the night; null on the last day.",
        "",
        "Broccoli Tours style:",
        "- Italian, competent and reassuring tone, concrete.",
        "- Short but useful descriptions (parking, manoeuvring, arrive early, alternatives).",
        "- In tips include: timing strategy, driving and parking advice, weather/seasonality hints"
        + (" (the period is to be suggested)." if suggests_period(preferences) else "."),
        "",
        "Reply ONLY with valid JSON, no markdown, following EXACTLY this schema:",
        ITINERARY_SCHEMA,
    ]
    return "\n".join(lines)


def build_repair_prompt(truncated_json: str, preferences: TravelPreferences) -> str:
    """Ask for the continuation of a cut-off response, never a fresh document."""
    expected_days = preferences.tripDurationDays
    day_hint = f" The itinerary should contain {expected_days} days in total." if expected_days else ""
    return (
        "The following JSON itinerary was cut off before it was complete."
        f"{day_hint}\n"
        "Output ONLY the text that must be appended to it so that it becomes valid JSON: "
        "start exactly where it stops, finish any open string, then close every open array and object. "
        "Do NOT repeat text that is already present and do NOT regenerate the itinerary from scratch. "
        "No markdown, no code fences, no comments.\n\n"
        "TRUNCATED JSON:\n"
        f"{truncated_json}"
    )
