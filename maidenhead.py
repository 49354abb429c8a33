# maidenhead.py
# Maidenhead grid locator decoding and great-circle distance.
#
# Locators decode to the centre of their square (4 chars) or subsquare
# (6 chars). Anything that can't be decoded comes back as (nan, nan) so a bad
# locator ends up at the bottom of a distance sort instead of stopping a run.

import math
import re

EARTH_RADIUS_KM = 6371.0

_LOCATOR_RE = re.compile(r'^[A-R]{2}[0-9]{2}([A-X]{2})?$')

NAN_LOCATION = (math.nan, math.nan)


def normalize_locator(locator):
    if not isinstance(locator, str):
        return ''
    return locator.strip().upper()


def is_valid_locator(locator) -> bool:
    return bool(_LOCATOR_RE.match(normalize_locator(locator)))


def to_location(locator):
    """Convert a 4 or 6 character Maidenhead locator to (lat, lon).

    Case-insensitive. Returns (nan, nan) for any other length or for
    characters outside the locator alphabet.
    """
    loc = normalize_locator(locator)
    if not _LOCATOR_RE.match(loc):
        return NAN_LOCATION

    a = ord(loc[0]) - ord('A')
    b = ord(loc[1]) - ord('A')
    c = int(loc[2])
    d = int(loc[3])

    if len(loc) == 6:
        e = ord(loc[4]) - ord('A')
        f = ord(loc[5]) - ord('A')
        # centre of the subsquare: half of 5' lon and 2.5' lat
        lon = (a * 20) - 180 + (c * 2) + (e / 12) + (1 / 24)
        lat = (b * 10) - 90 + d + (f / 24) + (1 / 48)
    else:
        # centre of the square
        lon = (a * 20) - 180 + (c * 2) + 1
        lat = (b * 10) - 90 + d + 0.5

    return (lat, lon)


def haversine_distance(coords1, coords2) -> float:
    """Great-circle distance in km between two (lat, lon) pairs.

    NaN in either point gives NaN.
    """
    lat1 = math.radians(coords1[0])
    lon1 = math.radians(coords1[1])
    lat2 = math.radians(coords2[0])
    lon2 = math.radians(coords2[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # rounding can push h just past 1 near the antipode; nan stays nan
    if h > 1.0:
        h = 1.0
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))
