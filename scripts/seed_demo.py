#!/usr/bin/env python3
"""Seed a running Kith API with a few demo contacts and interactions, going
through the same client stores the views use. Skips persons whose name already
exists. Requires KITH_API_URL (default http://localhost:8000) and KITH_USER_ID
in .env or the environment.
"""
import asyncio
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402

from kith.client import StoreContext  # noqa: E402

load_dotenv(REPO_ROOT / ".env")

DEMO = [
    (
        {
            "name": "Alice Moreau",
            "relationship_type": "Friend",
            "relationship_strength": 4,
            "origin": "University climbing club",
            "occupation": "Architect",
        },
        [
            {"title": "Coffee catch-up", "place_name": "Blue Bottle", "notes": "Moving to Lyon in spring."},
            {"title": "Bouldering", "notes": {"grade": "V4", "sent": True}},
        ],
    ),
    (
        {
            "name": "Bilal Haddad",
            "relationship_type": "Colleague",
            "relationship_strength": 3,
            "occupation": "Data engineer",
            "context": "Works on the ingestion team.",
        },
        [{"title": "Lunch", "place_name": "Canteen"}],
    ),
]


async def seed(base_url: str, user_id: str) -> int:
    async with StoreContext.connect(base_url, user_id) as stores:
        await stores.persons.fetch_all()
        if stores.persons.error:
            print(f"Could not list persons: {stores.persons.error}", file=sys.stderr)
            return 1
        existing = {p.name.lower() for p in stores.persons.items or ()}
        created = 0
        for person_data, interactions in DEMO:
            if person_data["name"].lower() in existing:
                print(f"Skipping {person_data['name']} (already exists)")
                continue
            person = await stores.persons.create(person_data)
            if person is None:
                print(f"Failed to create {person_data['name']}: {stores.persons.error}", file=sys.stderr)
                return 1
            for data in interactions:
                if await stores.interactions.create({**data, "person_id": person.id}) is None:
                    print(f"Failed to log '{data['title']}': {stores.interactions.error}", file=sys.stderr)
                    return 1
            created += 1
        print(f"Seeded {created} person(s).")
        return 0


def main() -> int:
    base_url = (os.environ.get("KITH_API_URL") or "http://localhost:8000").strip()
    user_id = (os.environ.get("KITH_USER_ID") or "").strip()
    if not user_id:
        print("KITH_USER_ID not set in .env", file=sys.stderr)
        return 1
    return asyncio.run(seed(base_url, user_id))


if __name__ == "__main__":
    sys.exit(main())
