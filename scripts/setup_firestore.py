#!/usr/bin/env python
"""
scripts/setup_firestore.py
────────────────────────────────────────────────────────────
One-shot bootstrap script for the Lost & Found backend:

• Creates / configures the image Storage bucket (optional)
• Generates security rules       → firestore.rules
• Prints the composite indexes the item listing needs (gcloud commands)

Run:
    python scripts/setup_firestore.py --project YOUR_GCP_PROJECT \
                                      --bucket  YOUR_BUCKET_NAME \
                                      --sa      path/to/service-account.json
"""

import argparse
import os
import sys
from itertools import combinations
from pathlib import Path
from typing import List, Tuple

from google.cloud import storage

# Optional equality filters accepted by GET /api/items
LISTING_FILTERS = ("category", "status", "lastSeenLocation")

# ──────────────────────────────────────────────────────────
#  Utils
# ──────────────────────────────────────────────────────────


def banner(msg: str) -> None:
    print(f"\n\033[96m⚙️  {msg}\033[0m")


def green(msg: str) -> None:
    print(f"\033[92m✅ {msg}\033[0m")


def red(msg: str) -> None:
    print(f"\033[91m❌ {msg}\033[0m", file=sys.stderr)


def listing_indexes(sort_field: str = "dateReported") -> List[List[Tuple[str, str]]]:
    """Every filter combination of the public listing, in both sort directions."""
    indexes = []
    for size in range(len(LISTING_FILTERS) + 1):
        for subset in combinations(LISTING_FILTERS, size):
            equality = [("isApproved", "ASCENDING"), ("isResolved", "ASCENDING")]
            equality += [(field, "ASCENDING") for field in subset]
            for order in ("DESCENDING", "ASCENDING"):
                indexes.append(equality + [(sort_field, order)])
    return indexes


def index_command(collection: str, fields: List[Tuple[str, str]]) -> str:
    parts = " \\\n  ".join(
        f"--field-config field-path={path},order={order}"
        for path, order in fields
    )
    return (
        "gcloud firestore indexes composite create \\\n"
        f"  --collection-group={collection} \\\n  {parts}"
    )


# ──────────────────────────────────────────────────────────
#  Firestore Setup Class
# ──────────────────────────────────────────────────────────


class FirestoreSetup:
    """One-shot bootstrapper for the items collection and image bucket"""

    def __init__(self, project_id: str, credentials: str | None, collection: str = "items"):
        self.project_id = project_id
        self.collection = collection
        if credentials:
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = credentials

    def run_full_setup(self, bucket_name: str | None = None) -> None:
        banner("Starting Lost & Found Firestore bootstrap")
        print(f"📋 Project ID: {self.project_id}")

        if bucket_name:
            self.setup_storage_bucket(bucket_name)
        self.generate_security_rules()
        self.print_indexes()

        banner("🎉 All done! Next steps")
        print(
            """\
1. Deploy security rules:
      firebase deploy --only firestore:rules

2. Create indexes (copy & paste printed gcloud commands).

3. Verify the collection and bucket in Firebase Console."""
        )

    # ──────────────────────────────────────────────────
    # 1. Storage bucket
    # ──────────────────────────────────────────────────
    def setup_storage_bucket(self, bucket_name: str) -> None:
        banner(f"Ensuring storage bucket '{bucket_name}' exists")
        client = storage.Client(project=self.project_id)
        bucket = client.bucket(bucket_name)
        if not bucket.exists():
            bucket = client.create_bucket(bucket_name, location="us-central1")
            green(f"Bucket {bucket_name} created")
        else:
            green(f"Bucket {bucket_name} already exists")

    # ──────────────────────────────────────────────────
    # 2. Security rules
    # ──────────────────────────────────────────────────
    def generate_security_rules(self) -> None:
        banner("Writing firestore.rules")
        rules = f"""rules_version = '2';
service cloud.firestore {{
  match /databases/{{database}}/documents {{

    // Items are written only by the backend (Admin credentials bypass rules)
    match /{self.collection}/{{itemId}} {{
      allow read: if resource.data.isApproved == true
        && resource.data.isResolved == false;
      allow write: if false;
    }}
  }}
}}"""
        Path("firestore.rules").write_text(rules, encoding="utf-8")
        green("firestore.rules written")

    # ──────────────────────────────────────────────────
    # 3. Index list
    # ──────────────────────────────────────────────────
    def print_indexes(self) -> None:
        banner("Composite indexes you MUST create")
        for fields in listing_indexes():
            print(index_command(self.collection, fields), "\n")


# ──────────────────────────────────────────────────────────
#  Main CLI
# ──────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(description="Lost & Found Firestore bootstrap")
    parser.add_argument("--project", required=True, help="GCP project id")
    parser.add_argument(
        "--sa",
        dest="service_account",
        help="Path to service-account JSON (optional if ADC already configured)",
    )
    parser.add_argument(
        "--bucket",
        help="Create / configure this Cloud Storage bucket (optional)",
    )
    parser.add_argument("--collection", default="items", help="Items collection name")
    args = parser.parse_args()

    try:
        setup = FirestoreSetup(args.project, args.service_account, args.collection)
        setup.run_full_setup(args.bucket)
    except Exception as e:
        red(f"Setup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
