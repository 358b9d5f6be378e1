# algorithms/scoring.py
"""
Match Score - how well a donor fits a blood request (0-100)

Stages are additive:
1. Blood compatibility (40 + bonuses), incompatible donors score 0
2. Availability (20)
3. Distance to the requester (0-20, neutral 10 when unknown)
4. Donation eligibility window (0-10)
5. Donation history (0-10)
"""
from algorithms.blood_compatibility import UNIVERSAL_DONOR, can_donate
from algorithms.eligibility import check_eligibility
from algorithms.exceptions import InvalidInput
from algorithms.haversine import haversine_distance

MAX_SCORE = 100

# 1. Blood compatibility
COMPATIBILITY_POINTS = 40
UNIVERSAL_DONOR_BONUS = 5
EXACT_MATCH_BONUS = 5

# 2. Availability
AVAILABILITY_POINTS = 20

# 3. Distance: (upper bound in km, points), first matching band wins
DISTANCE_BANDS = (
    (5, 20),
    (10, 15),
    (20, 10),
    (50, 5),
)
UNKNOWN_DISTANCE_POINTS = 10

# 4. Eligibility window
ELIGIBLE_POINTS = 10
INELIGIBLE_DECAY_DAYS = 5  # one point lost per 5 days still to wait

# 5. Donation history: (more than N donations, points)
HISTORY_BANDS = (
    (10, 10),
    (5, 7),
    (0, 5),
)


def donor_distance(donor, requester_location):
    """
    Distance in km between requester and donor, or None when either side has
    no coordinates.
    """
    if requester_location is None:
        return None

    req_lat = getattr(requester_location, 'latitude', None)
    req_lon = getattr(requester_location, 'longitude', None)
    donor_lat = getattr(donor, 'latitude', None)
    donor_lon = getattr(donor, 'longitude', None)

    if None in (req_lat, req_lon, donor_lat, donor_lon):
        return None

    return haversine_distance(req_lat, req_lon, donor_lat, donor_lon)


def compatibility_points(donor_blood_type, requested_blood_type):
    if not can_donate(donor_blood_type, requested_blood_type):
        return 0

    points = COMPATIBILITY_POINTS
    if donor_blood_type == UNIVERSAL_DONOR:
        points += UNIVERSAL_DONOR_BONUS
    if donor_blood_type == requested_blood_type:
        points += EXACT_MATCH_BONUS
    return points


def distance_points(distance_km):
    if distance_km is None:
        return UNKNOWN_DISTANCE_POINTS

    for max_km, points in DISTANCE_BANDS:
        if distance_km < max_km:
            return points
    return 0


def eligibility_points(eligibility):
    if eligibility.eligible:
        return ELIGIBLE_POINTS
    return max(0, ELIGIBLE_POINTS - eligibility.days_until_eligible / INELIGIBLE_DECAY_DAYS)


def history_points(donation_count):
    if donation_count is None:
        donation_count = 0
    if isinstance(donation_count, bool) or not isinstance(donation_count, int):
        raise InvalidInput(f"donation_count must be an integer, got {type(donation_count).__name__}")
    if donation_count < 0:
        raise InvalidInput(f"donation_count must not be negative, got {donation_count}")

    for more_than, points in HISTORY_BANDS:
        if donation_count > more_than:
            return points
    return 0


def score_donor(donor, blood_request, requester_location=None, now=None):
    """
    Score a donor and keep the pieces the ranking needs.

    Returns:
        tuple: (score, eligibility, distance_km). Eligibility and distance are
        None when the donor is incompatible.
    """
    base = compatibility_points(donor.blood_type, blood_request.blood_type)
    if base == 0:
        return 0, None, None

    eligibility = check_eligibility(donor.last_donation_date, now=now)
    distance_km = donor_distance(donor, requester_location)

    score = (
        base
        + (AVAILABILITY_POINTS if donor.is_available is True else 0)
        + distance_points(distance_km)
        + eligibility_points(eligibility)
        + history_points(getattr(donor, 'donation_count', 0))
    )
    return min(MAX_SCORE, score), eligibility, distance_km


def calculate_match_score(donor, blood_request, requester_location=None, now=None):
    """
    Calculate how well a donor matches a blood request

    Args:
        donor: Object with blood_type, is_available, latitude, longitude,
            last_donation_date and donation_count
        blood_request: Object with blood_type
        requester_location: Object with latitude/longitude, or None
        now (datetime | None): Reference time for the eligibility window

    Returns:
        Score between 0 and 100, 0 meaning the donor cannot give to the request
    """
    score, _, _ = score_donor(donor, blood_request, requester_location, now=now)
    return score
