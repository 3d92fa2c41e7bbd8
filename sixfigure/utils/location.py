"""Best-effort country inference from free-text job locations.

    >>> infer_country_code("San Francisco, CA")
    'US'
    >>> infer_country_code("Toronto, Canada")
    'CA'
    >>> infer_country_code("Remote") is None
    True
"""

import re
from typing import Optional

# Country names and common aliases, lower-case.
_COUNTRY_NAMES = {
    "united states": "US",
    "united states of america": "US",
    "usa": "US",
    "us": "US",
    "u.s": "US",
    "canada": "CA",
    "united kingdom": "GB",
    "uk": "GB",
    "england": "GB",
    "scotland": "GB",
    "wales": "GB",
    "great britain": "GB",
    "ireland": "IE",
    "germany": "DE",
    "deutschland": "DE",
    "netherlands": "NL",
    "the netherlands": "NL",
    "france": "FR",
    "spain": "ES",
    "portugal": "PT",
    "italy": "IT",
    "austria": "AT",
    "belgium": "BE",
    "finland": "FI",
    "luxembourg": "LU",
    "switzerland": "CH",
    "sweden": "SE",
    "norway": "NO",
    "denmark": "DK",
    "poland": "PL",
    "australia": "AU",
    "new zealand": "NZ",
    "singapore": "SG",
    "india": "IN",
    "japan": "JP",
    "south korea": "KR",
    "korea": "KR",
    "united arab emirates": "AE",
    "uae": "AE",
    "brazil": "BR",
    "mexico": "MX",
}

# Cities that commonly appear without a country.
_CITIES = {
    "new york": "US",
    "new york city": "US",
    "nyc": "US",
    "san francisco": "US",
    "seattle": "US",
    "austin": "US",
    "boston": "US",
    "chicago": "US",
    "los angeles": "US",
    "toronto": "CA",
    "vancouver": "CA",
    "montreal": "CA",
    "london": "GB",
    "manchester": "GB",
    "edinburgh": "GB",
    "dublin": "IE",
    "berlin": "DE",
    "munich": "DE",
    "amsterdam": "NL",
    "paris": "FR",
    "madrid": "ES",
    "barcelona": "ES",
    "lisbon": "PT",
    "zurich": "CH",
    "stockholm": "SE",
    "oslo": "NO",
    "copenhagen": "DK",
    "warsaw": "PL",
    "sydney": "AU",
    "melbourne": "AU",
    "auckland": "NZ",
    "bangalore": "IN",
    "bengaluru": "IN",
    "tokyo": "JP",
    "seoul": "KR",
    "dubai": "AE",
}

_US_STATES = {
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN", "IA",
    "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT",
    "VA", "WA", "WV", "WI", "WY", "DC",
}

_CA_PROVINCES = {"ON", "BC", "QC", "AB", "MB", "SK", "NS", "NB", "NL", "PE"}

_SPLIT_RE = re.compile(r"\s*[,/|;()\-–—]\s*")


def infer_country_code(location: Optional[str]) -> Optional[str]:
    """Guess an ISO 3166-1 alpha-2 code from a location string.

    Parts are checked from last to first, since locations usually end with
    the country. Two-letter parts are read as US states or Canadian
    provinces only when they appear after a city ("Austin, TX").
    """
    if not location or not location.strip():
        return None

    parts = [part for part in _SPLIT_RE.split(location.strip()) if part]
    if not parts:
        return None

    for index in range(len(parts) - 1, -1, -1):
        part = parts[index]
        lowered = part.lower().strip(". ")

        if lowered in _COUNTRY_NAMES:
            return _COUNTRY_NAMES[lowered]
        if lowered in _CITIES:
            return _CITIES[lowered]

        if index > 0 and len(part) == 2 and part.isupper():
            if part in _US_STATES:
                return "US"
            if part in _CA_PROVINCES:
                return "CA"

    return None
