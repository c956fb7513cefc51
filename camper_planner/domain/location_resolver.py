from __future__ import annotations

import hashlib
from typing import Optional

from camper_planner.api.models.schemas import Location, TravelPreferences
from camper_planner.domain.catalogs import LocationCatalog

# Rough centre of Italy, used when a free-text destination has no catalog match
DEFAULT_CENTROID = (42.0, 12.0)
DEFAULT_COUNTRY_CODE = "IT"


def resolve_location(preferences: TravelPreferences, catalog: LocationCatalog) -> Optional[Location]:
    """
    Map the traveller's destination input to a catalog location.

    Returns None when a free-text query matches nothing, so callers keep the raw
    query instead of silently anchoring the trip somewhere else.
    """
    if preferences.locationId:
        by_id = catalog.find_by_id(preferences.locationId)
        if by_id is not None:
            return by_id

    query = (preferences.locationQuery or "").strip().casefold()
    locations = catalog.get_all()
    if not query:
        return locations[0] if locations else None

    for loc in locations:
        if query in loc.name.casefold() or query in (loc.region or "").casefold():
            return loc
    return None


def synthesize_location(query: str) -> Location:
    """Stand-in anchor for a destination that is not in the catalog."""
    digest = hashlib.sha256(query.casefold().encode("utf-8")).hexdigest()[:10]
    lat, lng = DEFAULT_CENTROID
    return Location(
        id=f"custom-{digest}",
        name=query,
        countryCode=DEFAULT_COUNTRY_CODE,
        region=None,
        latitude=lat,
        longitude=lng,
        description=f"Destinazione personalizzata: {query}",
    )


def resolve_anchor(preferences: TravelPreferences, catalog: LocationCatalog) -> Location:
    """Like resolve_location, but always returns an anchor with coordinates."""
    resolved = resolve_location(preferences, catalog)
    if resolved is not None:
        return resolved
    return synthesize_location((preferences.locationQuery or "").strip())
