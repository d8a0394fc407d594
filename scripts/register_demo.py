#!/usr/bin/env python
"""
Registers a handful of demo lost/found reports and, with --approve, marks
them approved so they show up in listings and matching.

    python scripts/register_demo.py --approve
"""

import argparse

from lostfound_ai.common.utils import setup_logging
from lostfound_ai.semantic_db import find_potential_matches, register_item
from lostfound_ai.semantic_db.core import get_item_store

DEMO_ITEMS = [
    {
        "name": "Brown Leather Wallet (with ID)",
        "description": "Lost my wallet between the Science block and the student union building. "
                       "Contains a student ID and a faded picture of a cat.",
        "category": "Wallet / ID Card",
        "lastSeenLocation": "Student Union Cafeteria",
        "status": "lost",
    },
    {
        "name": "Student ID Card (John D. Smith)",
        "description": "Found an ID card belonging to John D. Smith on the pathway between the dorms and the gym.",
        "category": "Wallet / ID Card",
        "lastSeenLocation": "Dorm Pathway",
        "whereToCollect": "Front Desk, Hall 3",
        "status": "found",
    },
    {
        "name": "Red iPhone 15 Pro",
        "description": "Found under a bench near the engineering building. Phone case is cracked.",
        "category": "Electronics",
        "lastSeenLocation": "Engineering Building, Room B-10",
        "whereToCollect": "University Police Office, Room 102",
        "status": "found",
    },
    {
        "name": "Small Set of Keys on Lanyard",
        "description": "Lost set of three keys on a blue university lanyard near the main library entrance. "
                       "One key is a Yale key, the others are simple silver.",
        "category": "Keys",
        "lastSeenLocation": "Main Library Entrance",
        "status": "lost",
    },
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Register demo lost & found items")
    parser.add_argument("--approve", action="store_true", help="Mark demo items approved")
    args = parser.parse_args()

    setup_logging()
    store = get_item_store()

    item_ids = []
    for fields in DEMO_ITEMS:
        resp = register_item(fields, poster_uid="demo_script")
        item_ids.append(resp["item_id"])
        print(f"✅ {fields['status']:5} {resp['item_id']}  {fields['name']}")

    if not args.approve:
        return

    for item_id in item_ids:
        store.items.document(item_id).update({"isApproved": True})
    print(f"Approved {len(item_ids)} items")

    for item_id in item_ids:
        result = find_potential_matches(item_id)
        for match in result["matches"]:
            print(f"   {item_id} ↔ {match['id']}  score={match['score']}")


if __name__ == "__main__":
    main()
