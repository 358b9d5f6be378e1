"""
Haversine Algorithm - Calculate distance between two geographical points
Used to find donors nearest to the person requesting blood
"""

import math
from numbers import Real

from algorithms.exceptions import InvalidInput

# Radius of earth in kilometers
EARTH_RADIUS_KM = 6371


def validate_coordinate(value, name='coordinate'):
    """
    Make sure a latitude/longitude is a finite real number.

    Strings and booleans are rejected rather than coerced.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidInput(f"{name} must be finite, got {value}")
    return float(value)


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate straight-line distance between two points.
    Note: This is "as the crow flies" distance, not road distance.

    Args:
        lat1, lon1: Latitude and longitude of point 1 (requester), in degrees
        lat2, lon2: Latitude and longitude of point 2 (donor), in degrees

    Returns:
        Distance in kilometers
    """
    lat1 = validate_coordinate(lat1, 'lat1')
    lon1 = validate_coordinate(lon1, 'lon1')
    lat2 = validate_coordinate(lat2, 'lat2')
    lon2 = validate_coordinate(lon2, 'lon2')

    # Convert decimal degrees to radians
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat/2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon/2)**2
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return c * EARTH_RADIUS_KM
