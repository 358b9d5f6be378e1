# algorithms/matching.py
from collections import namedtuple
from dataclasses import dataclass
from typing import Any, Optional

from algorithms.eligibility import Eligibility
from algorithms.exceptions import InvalidInput
from algorithms.scoring import score_donor

DEFAULT_MATCH_LIMIT = 50

Location = namedtuple('Location', ['latitude', 'longitude'])


@dataclass(frozen=True)
class MatchResult:
    donor: Any
    eligibility: Eligibility
    match_score: float
    distance_km: Optional[float] = None


def rank_donors(donors, blood_request, requester_location=None, limit=DEFAULT_MATCH_LIMIT, now=None):
    """
    Rank compatible donors for a blood request

    Steps:
    1. Score every donor
    2. Drop donors that cannot give to the request (score 0)
    3. Sort by score, highest first; equal scores keep their input order
    4. Keep the first `limit` results

    Args:
        donors: Iterable of donor objects (models or snapshots)
        blood_request: Object with blood_type
        requester_location: Object with latitude/longitude, or None
        limit (int): Maximum number of results
        now (datetime | None): Reference time for the eligibility window

    Returns:
        List of MatchResult
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidInput(f"limit must be a non-negative integer, got {limit!r}")

    matches = []
    for donor in donors:
        score, eligibility, distance_km = score_donor(donor, blood_request, requester_location, now=now)
        if score == 0:
            continue
        matches.append(MatchResult(
            donor=donor,
            eligibility=eligibility,
            match_score=score,
            distance_km=distance_km,
        ))

    # list.sort is stable
    matches.sort(key=lambda m: m.match_score, reverse=True)

    return matches[:limit]
