"""Seed a development database with rooms.

Creates the tables when missing and stores a small two-hotel room
inventory. Rooms are read-only to the booking API, so this script is the
way to get bookable rooms into a fresh environment.

Usage:
    roomrate-seed --env dev
    roomrate-seed --env dev --create-tables
"""

import argparse
import os
from decimal import Decimal

from roomrate.config import Settings
from roomrate.models import Room, RoomCategory
from roomrate.services.dynamodb import DynamoDBService

SAMPLE_ROOMS: list[Room] = [
    Room(room_id="gp-101", hotel_id="grand-palace", room_number="101", name="Garden Single",
         category=RoomCategory.STANDARD, base_price=Decimal("1000"), capacity=1),
    Room(room_id="gp-102", hotel_id="grand-palace", room_number="102", name="Courtyard Double",
         category=RoomCategory.DELUXE, base_price=Decimal("1500"), capacity=2),
    Room(room_id="gp-103", hotel_id="grand-palace", room_number="103", name="Palace Suite",
         category=RoomCategory.SUITE, base_price=Decimal("2500"), capacity=3),
    Room(room_id="gp-104", hotel_id="grand-palace", room_number="104", name="Street Single",
         category=RoomCategory.STANDARD, base_price=Decimal("1200"), capacity=1),
    Room(room_id="gp-105", hotel_id="grand-palace", room_number="105", name="Terrace Double",
         category=RoomCategory.DELUXE, base_price=Decimal("1700"), capacity=2),
    Room(room_id="sv-201", hotel_id="sea-view", room_number="201", name="Ocean Suite",
         category=RoomCategory.SUITE, base_price=Decimal("3000"), capacity=4),
    Room(room_id="sv-202", hotel_id="sea-view", room_number="202", name="Harbour Single",
         category=RoomCategory.STANDARD, base_price=Decimal("1100"), capacity=1),
    Room(room_id="sv-203", hotel_id="sea-view", room_number="203", name="Bay Double",
         category=RoomCategory.DELUXE, base_price=Decimal("1600"), capacity=2),
    Room(room_id="sv-204", hotel_id="sea-view", room_number="204", name="Presidential Suite",
         category=RoomCategory.PRESIDENTIAL, base_price=Decimal("3500"), capacity=4),
    Room(room_id="sv-205", hotel_id="sea-view", room_number="205", name="Dune Single",
         category=RoomCategory.STANDARD, base_price=Decimal("1050"), capacity=1),
]


def seed_rooms(db: DynamoDBService, rooms: list[Room] = SAMPLE_ROOMS) -> int:
    """Store the rooms and return how many were written."""
    for room in rooms:
        db.put_room(room)
        print(f"  ✓ {room.room_id} {room.category.value}: {room.base_price}/night, sleeps {room.capacity}")
    return len(rooms)


def main() -> int:
    """Run the seed script."""
    parser = argparse.ArgumentParser(description="Seed development database with rooms")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"),
        help="AWS region (default: eu-west-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    if args.env == "prod":
        confirm = input("⚠️  WARNING: You are about to modify PRODUCTION data. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    db = DynamoDBService(Settings(environment=args.env, aws_region=args.region))
    print(f"\n🌱 Seeding {args.env} environment (region: {args.region})\n")

    if args.create_tables:
        db.create_tables()

    count = seed_rooms(db)
    print(f"\nSeeded {count} rooms into {db.name_prefix}-rooms")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
