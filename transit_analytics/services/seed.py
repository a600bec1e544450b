"""Reference network loaded into an empty store on startup."""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from ..repositories.base import IncidentRepository

logger = logging.getLogger(__name__)

REFERENCE_NETWORK: Dict[str, Tuple[str, ...]] = {
    "North South Line": (
        "Jurong East", "Bukit Batok", "Bukit Gombak", "Choa Chu Kang", "Yew Tee",
        "Kranji", "Marsiling", "Woodlands", "Admiralty", "Sembawang", "Canberra",
        "Yishun", "Khatib", "Yio Chu Kang", "Ang Mo Kio", "Bishan", "Braddell",
        "Toa Payoh", "Novena", "Newton", "Orchard", "Somerset", "Dhoby Ghaut",
        "City Hall", "Raffles Place", "Marina Bay",
    ),
    "East West Line": (
        "Pasir Ris", "Tampines", "Simei", "Tanah Merah", "Bedok", "Kembangan",
        "Eunos", "Paya Lebar", "Aljunied", "Kallang", "Lavender", "Bugis",
        "City Hall", "Raffles Place", "Tanjong Pagar", "Outram Park", "Tiong Bahru",
        "Redhill", "Queenstown", "Commonwealth", "Buona Vista", "Dover", "Clementi",
        "Jurong East", "Chinese Garden", "Lakeside", "Boon Lay", "Pioneer",
        "Joo Koon", "Gul Circle", "Tuas Crescent", "Tuas West Road", "Tuas Link",
    ),
    "Circle Line": (
        "Dhoby Ghaut", "Bras Basah", "Esplanade", "Promenade", "Nicoll Highway",
        "Stadium", "Mountbatten", "Dakota", "Paya Lebar", "MacPherson", "Tai Seng",
        "Bartley", "Serangoon", "Lorong Chuan", "Bishan", "Marymount", "Caldecott",
        "Botanic Gardens", "Farrer Road", "Holland Village", "Buona Vista",
        "one-north", "Kent Ridge", "Haw Par Villa", "Pasir Panjang",
        "Labrador Park", "Telok Blangah", "HarbourFront",
    ),
    "Downtown Line": (
        "Chinatown", "Telok Ayer", "Downtown", "Bayfront", "Promenade", "Bugis",
        "Rochor", "Little India", "Farrer Park", "Boon Keng", "Bendemeer",
        "Geylang Bahru", "Mattar", "MacPherson", "Ubi", "Kaki Bukit", "Bedok North",
        "Bedok Reservoir", "Tampines West", "Tampines", "Tampines East",
        "Upper Changi", "Expo",
    ),
    "Thomson East Coast Line": (
        "Woodlands", "Woodlands South", "Springleaf", "Lentor", "Mayflower",
        "Bright Hill", "Upper Thomson", "Caldecott", "Stevens", "Napier",
        "Orchard Boulevard", "Orchard", "Great World", "Havelock", "Outram Park",
        "Maxwell", "Shenton Way", "Marina Bay",
    ),
    "North East Line": (
        "HarbourFront", "Outram Park", "Chinatown", "Clarke Quay", "Dhoby Ghaut",
        "Little India", "Farrer Park", "Boon Keng", "Potong Pasir", "Woodleigh",
        "Serangoon", "Kovan", "Hougang", "Buangkok", "Sengkang", "Punggol",
    ),
}


async def seed_reference_network(
    repository: IncidentRepository,
    network: Dict[str, Tuple[str, ...]] = REFERENCE_NETWORK,
) -> int:
    """Create every line and station of `network`; safe to run repeatedly.

    Returns the number of stations processed.
    """
    processed = 0
    for line_name, station_names in network.items():
        line = await repository.get_or_create_line(line_name)
        for station_name in station_names:
            await repository.get_or_create_station(station_name, line.id)
            processed += 1

    logger.info(
        "Reference network seeded",
        extra={"lines": len(network), "stations": processed},
    )
    return processed
