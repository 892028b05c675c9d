"""
Location resolution: free text or literal coordinates -> named coordinate,
and best-effort place names for arbitrary points along a route.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .exceptions import GeocodingAPIError, LocationNotFoundError
from .models.route_models import Coordinate, ResolvedLocation
from .utils.geo_utils import parse_coordinate_text

logger = logging.getLogger(__name__)

POI_FIELDS = ('tourism', 'building', 'amenity', 'shop', 'leisure')
LOCALITY_FIELDS = ('neighbourhood', 'suburb', 'village', 'town', 'city')

ROUTE_POINT_FALLBACK = 'Point along the route'
GENERIC_LABELS = {
    'origin': 'Current location',
    'destination': 'Specified destination',
}


class NominatimGeocoder:
    """Thin client for the Nominatim search/reverse endpoints."""

    def __init__(self, config: Config):
        self.base_url = config.nominatim_url.rstrip('/')
        self.timeout = config.request_timeout
        self.min_interval = config.nominatim_min_interval
        self.headers = {
            'User-Agent': config.nominatim_user_agent,
            'Accept-Language': config.accept_language,
        }
        self._last_call: Optional[float] = None

    def _throttle(self):
        # Nominatim usage policy: at most one request per second
        if self._last_call is not None and self.min_interval > 0:
            wait = self.min_interval - (time.monotonic() - self._last_call)
            if wait > 0:
                time.sleep(wait)
        self._last_call = time.monotonic()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        self._throttle()
        url = f"{self.base_url}/{endpoint}"
        try:
            response = requests.get(url, params=params, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise GeocodingAPIError(f"Nominatim {endpoint} request failed: {e}") from e
        except ValueError as e:
            raise GeocodingAPIError(f"Nominatim {endpoint} returned malformed JSON") from e

    def forward_geocode(self, query: str, preferred_region: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Search for a place name.

        Returns candidates in provider rank order, each as
        ``{lat, lng, address, display_name, name}``. Results are not filtered
        by ``preferred_region``: Nominatim can only restrict to a country, and
        foreign matches must still come back when nothing local exists.
        """
        params = {
            'q': query,
            'format': 'jsonv2',
            'addressdetails': 1,
            'limit': 5,
        }
        data = self._get('search', params)
        if not isinstance(data, list):
            raise GeocodingAPIError("Nominatim search returned an unexpected body")

        candidates = []
        try:
            for item in data:
                address = item.get('address') or {}
                if not isinstance(address, dict):
                    raise TypeError(f"address is a {type(address).__name__}")
                candidates.append({
                    'lat': float(item['lat']),
                    'lng': float(item['lon']),
                    'address': address,
                    'display_name': str(item.get('display_name') or ''),
                    'name': str(item.get('name') or ''),
                })
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise GeocodingAPIError(f"Malformed Nominatim search result: {e}") from e

        logger.debug(f"{len(candidates)} candidates for {query!r}")
        return candidates

    def reverse_geocode(self, lat: float, lng: float) -> Dict[str, Any]:
        """Return address fields for a point, plus ``display_name`` and ``name``."""
        params = {
            'lat': lat,
            'lon': lng,
            'format': 'jsonv2',
            'addressdetails': 1,
            'zoom': 18,
        }
        data = self._get('reverse', params)
        if not isinstance(data, dict):
            raise GeocodingAPIError("Nominatim reverse returned an unexpected body")
        if 'error' in data:
            raise GeocodingAPIError(f"Nominatim reverse error: {data['error']}")

        address = data.get('address') or {}
        if not isinstance(address, dict):
            raise GeocodingAPIError("Nominatim reverse returned a malformed address")
        fields = dict(address)
        fields['display_name'] = str(data.get('display_name') or '')
        fields['name'] = str(data.get('name') or '')
        return fields


def derive_short_name(address: Dict[str, Any], raw_name: str = '', display_name: str = '',
                      query: str = '') -> str:
    """Pick the most specific human-readable name available.

    Order: point-of-interest category, road, locality, the provider's own
    label, then the query text.
    """
    for fields in (POI_FIELDS, ('road',), LOCALITY_FIELDS):
        for key in fields:
            value = address.get(key)
            if value:
                return str(value)
    if raw_name:
        return raw_name
    if display_name:
        return display_name.split(',')[0].strip()
    return query


class LocationResolver:
    """Resolves route endpoints and labels intermediate stops."""

    def __init__(self, config: Config, geocoder: Optional[NominatimGeocoder] = None):
        self.preferred_region = config.preferred_region
        self.geocoder = geocoder if geocoder is not None else NominatimGeocoder(config)

    def resolve_input(self, text: str, role: str = 'origin') -> ResolvedLocation:
        """Resolve user input for one endpoint; raises LocationNotFoundError."""
        query = (text or '').strip()
        if not query:
            raise LocationNotFoundError(text or '', "empty input")

        literal = parse_coordinate_text(query)
        if literal is not None:
            coordinate = Coordinate(lat=literal[0], lng=literal[1])
            label = GENERIC_LABELS.get(role, GENERIC_LABELS['destination'])
            display_name = self.reverse_resolve_name(coordinate)
            logger.info(f"Using literal coordinates for {role}: {coordinate.lat},{coordinate.lng}")
            return ResolvedLocation(coordinate=coordinate, short_name=label, display_name=display_name)

        try:
            candidates = self.geocoder.forward_geocode(query, self.preferred_region)
        except GeocodingAPIError as e:
            logger.warning(f"Geocoding failed for {query!r}: {e}")
            raise LocationNotFoundError(query, "geocoding service unavailable") from e

        if not candidates:
            raise LocationNotFoundError(query)

        best = self._pick_candidate(candidates)
        coordinate = Coordinate(lat=best['lat'], lng=best['lng'])
        short_name = derive_short_name(best['address'], best.get('name', ''), best['display_name'], query)
        display_name = best['display_name'] or short_name
        logger.info(f"Resolved {role} {query!r} -> {short_name} ({coordinate.lat:.5f},{coordinate.lng:.5f})")
        return ResolvedLocation(coordinate=coordinate, short_name=short_name, display_name=display_name)

    def _pick_candidate(self, candidates: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.preferred_region:
            for candidate in candidates:
                country = str(candidate['address'].get('country_code', '')).lower()
                if country == self.preferred_region:
                    return candidate
        return candidates[0]

    def reverse_resolve_name(self, coordinate: Coordinate) -> str:
        """Best-effort name for a point; never raises."""
        try:
            fields = self.geocoder.reverse_geocode(coordinate.lat, coordinate.lng)
        except GeocodingAPIError as e:
            logger.debug(f"Reverse geocoding failed at {coordinate.lat},{coordinate.lng}: {e}")
            return ROUTE_POINT_FALLBACK
        return derive_short_name(fields, fields.get('name', ''), fields.get('display_name', '')) or ROUTE_POINT_FALLBACK
