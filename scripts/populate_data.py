#!/usr/bin/env python
"""Populate a running transit analytics API with sample lines, stations and incidents."""

from __future__ import annotations

import argparse
import random
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import httpx

BASE_URL = "http://localhost:8000"
TIMEOUT = 10.0

SAMPLE_STATIONS: Dict[str, List[str]] = {
    "North-South Line": [
        "Jurong East", "Bukit Batok", "Bukit Gombak", "Choa Chu Kang",
        "Yew Tee", "Kranji", "Marsiling", "Woodlands", "Admiralty",
        "Sembawang", "Canberra", "Yishun", "Khatib", "Yio Chu Kang",
        "Ang Mo Kio", "Bishan", "Braddell", "Toa Payoh", "Novena",
        "Newton", "Orchard", "Somerset", "Dhoby Ghaut", "City Hall",
        "Raffles Place", "Marina Bay",
    ],
    "East-West Line": [
        "Pasir Ris", "Tampines", "Simei", "Tanah Merah", "Bedok",
        "Kembangan", "Eunos", "Paya Lebar", "Aljunied", "Kallang",
        "Lavender", "Bugis", "City Hall", "Raffles Place", "Tanjong Pagar",
        "Outram Park", "Tiong Bahru", "Redhill", "Queenstown",
    ],
    "Circle Line": [
        "Dhoby Ghaut", "Bras Basah", "Esplanade", "Promenade",
        "Nicoll Highway", "Stadium", "Mountbatten", "Dakota",
        "Paya Lebar", "MacPherson", "Tai Seng", "Bartley",
        "Serangoon", "Lorong Chuan", "Bishan", "Marymount",
    ],
    "Downtown Line": [
        "Bukit Panjang", "Cashew", "Hillview", "Beauty World",
        "King Albert Park", "Sixth Avenue", "Tan Kah Kee", "Botanic Gardens",
        "Stevens", "Newton", "Little India", "Rochor", "Bugis",
        "Promenade", "Bayfront", "Downtown", "Telok Ayer", "Chinatown",
    ],
    "Thomson-East Coast Line": [
        "Woodlands North", "Woodlands", "Woodlands South", "Springleaf",
        "Lentor", "Mayflower", "Bright Hill", "Upper Thomson",
        "Caldecott", "Mount Pleasant", "Stevens", "Napier", "Orchard Boulevard",
    ],
}

# Repeated entries weight the draw towards mechanical and signal faults
INCIDENT_TYPES = ["mechanical", "signal", "power", "mechanical", "signal", "mechanical", "weather", "other"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill the API with sample transit incident data.")
    parser.add_argument("--base-url", default=BASE_URL, help="Base URL of the running API.")
    parser.add_argument("--incidents", type=int, default=420, help="Number of incidents to generate.")
    parser.add_argument("--days", type=int, default=90, help="Spread incidents over this many past days.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data.")
    return parser


def wait_for_api(client: httpx.Client, attempts: int = 30) -> bool:
    """Poll /health once per second until the API answers."""
    print("⏳ Waiting for API to be ready...")
    for _ in range(attempts):
        try:
            response = client.get("/health")
            if response.status_code == 200:
                print("✓ API is ready!\n")
                return True
        except httpx.TransportError:
            pass
        time.sleep(1)
        print(".", end="", flush=True)
    return False


def create_line(client: httpx.Client, name: str) -> Dict:
    response = client.post("/api/lines", json={"name": name})
    response.raise_for_status()
    return response.json()


def create_station(client: httpx.Client, name: str, line_id: str, status: str = "active") -> Dict:
    response = client.post("/api/stations", json={"name": name, "line_id": line_id, "status": status})
    response.raise_for_status()
    return response.json()


def create_incident(
    client: httpx.Client,
    line: str,
    station: str,
    timestamp: datetime,
    duration_minutes: int,
    incident_type: str,
) -> Dict:
    payload = {
        "line": line,
        "station": station,
        "timestamp": timestamp.isoformat(),
        "duration_minutes": duration_minutes,
        "incident_type": incident_type,
    }
    response = client.post("/api/incidents", json=payload)
    response.raise_for_status()
    return response.json()


def random_timestamp(rng: random.Random, days: int, now: Optional[datetime] = None) -> datetime:
    """A time in the last `days` days; 40% of draws fall in the 7-9am or 5-8pm peaks."""
    now = now or datetime.now(timezone.utc)
    day = (now - timedelta(days=rng.randrange(days))).replace(hour=0, minute=0, second=0, microsecond=0)

    hour = rng.randrange(24)
    if rng.random() < 0.4:
        hour = 7 + rng.randrange(3) if rng.random() < 0.5 else 17 + rng.randrange(4)

    timestamp = day + timedelta(hours=hour, minutes=rng.randrange(60), seconds=rng.randrange(60))
    # Today's peak hour may still be ahead of us
    return min(timestamp, now)


def random_duration(rng: random.Random) -> int:
    """5-120 minutes, weighted towards short disruptions."""
    draw = rng.random()
    if draw < 0.5:
        return 5 + rng.randrange(16)
    if draw < 0.8:
        return 20 + rng.randrange(31)
    return 50 + rng.randrange(71)


def populate(client: httpx.Client, incidents: int, days: int, rng: random.Random) -> Tuple[int, int, int]:
    """Create sample data and return (lines, stations, incidents) created."""
    print("📍 Creating lines...")
    line_ids: Dict[str, str] = {}
    for line_name in SAMPLE_STATIONS:
        try:
            line = create_line(client, line_name)
        except httpx.HTTPError as exc:
            print(f"❌ Failed to create line {line_name}: {exc}")
            continue
        line_ids[line_name] = line["id"]
        print(f"  ✓ Created line: {line_name} (ID: {line['id']})")
    print()

    print("🚉 Creating stations...")
    station_count = 0
    pairs: List[Tuple[str, str]] = []
    for line_name, station_names in SAMPLE_STATIONS.items():
        line_id = line_ids.get(line_name)
        if line_id is None:
            continue
        for station_name in station_names:
            try:
                create_station(client, station_name, line_id)
            except httpx.HTTPError as exc:
                print(f"❌ Failed to create station {station_name}: {exc}")
                continue
            station_count += 1
            pairs.append((line_name, station_name))
    print(f"  ✓ Created {station_count} stations\n")

    if not pairs:
        return len(line_ids), station_count, 0

    print(f"⚠️  Creating {incidents} sample incidents over the last {days} days...")
    success = failed = 0
    for number in range(1, incidents + 1):
        line_name, station_name = rng.choice(pairs)
        try:
            create_incident(
                client,
                line_name,
                station_name,
                random_timestamp(rng, days),
                random_duration(rng),
                rng.choice(INCIDENT_TYPES),
            )
        except httpx.HTTPError as exc:
            failed += 1
            if failed <= 5:
                print(f"  ⚠ Failed to create incident #{number}: {exc}")
            continue
        success += 1
        if success % 50 == 0:
            print(f"  ✓ Created {success} incidents...")
    print(f"  ✓ Successfully created {success} incidents ({failed} failed)\n")

    return len(line_ids), station_count, success


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    rng = random.Random(args.seed)

    with httpx.Client(base_url=args.base_url, timeout=TIMEOUT) as client:
        if not wait_for_api(client):
            print("\n❌ API is not available. Start it with: python -m transit_analytics.main")
            return 1
        lines, stations, incidents = populate(client, args.incidents, args.days, rng)

    print("✅ Database population complete!\n")
    print("📊 Summary:")
    print(f"  - Lines created: {lines}")
    print(f"  - Stations created: {stations}")
    print(f"  - Incidents created: {incidents}")
    print(f"\nAPI docs: {args.base_url}/docs")
    return 0


if __name__ == "__main__":
    sys.exit(main())
