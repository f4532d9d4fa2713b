"""
Seed Script - Creates sample students through the API.

Generates random but plausible student records and posts them one by one
to the create endpoint, so every record goes through normal validation.

Usage:
    python seed_data.py                                   # 25 students, default URL
    python seed_data.py http://localhost:8000/api         # Custom API URL
    python seed_data.py http://localhost:8000/api 50      # Custom count
"""

import os
import random
import sys
import uuid

from student_records.client.api_client import StudentApiClient
from student_records.errors import StudentRecordsError, ValidationError
from student_records.schemas import GENDERS, YEAR_LEVELS

FIRST_NAMES = [
    "Liam", "Olivia", "Noah", "Emma", "Mateo", "Ava", "Lucas", "Mia",
    "Ethan", "Sofia", "Aiden", "Isla", "Kai", "Amara", "Leo", "Chloe",
]
LAST_NAMES = [
    "Santos", "Reyes", "Cruz", "Garcia", "Nguyen", "Kim", "Patel", "Okafor",
    "Smith", "Müller", "Rossi", "Tanaka", "Silva", "Novak", "Haddad", "Brown",
]
COURSES = ["Computer Science", "Engineering", "Business", "Arts", "Science"]
SECTIONS = ["A", "B", "C", "D"]


def make_student(rng: random.Random) -> dict:
    first_name = rng.choice(FIRST_NAMES)
    last_name = rng.choice(LAST_NAMES)
    return {
        "email": "{}.{}.{}@example.com".format(
            first_name.lower(), last_name.lower(), uuid.uuid4().hex[:6]),
        "firstName": first_name,
        "lastName": last_name,
        "middleName": rng.choice(FIRST_NAMES) if rng.random() < 0.5 else None,
        "age": rng.randint(17, 30),
        "gender": rng.choice(GENDERS),
        "course": rng.choice(COURSES),
        "yearLevel": rng.choice(YEAR_LEVELS),
        "section": rng.choice(SECTIONS),
    }


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:8000/api")
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 25
    rng = random.Random()

    print(f"Seeding {count} students into: {api_url}")
    print()

    created = 0
    rejected = 0
    with StudentApiClient(base_url=api_url) as api:
        for _ in range(count):
            payload = make_student(rng)
            try:
                student = api.create_student(payload)
            except ValidationError as e:
                rejected += 1
                print(f"  ❌ {payload['email']}: {e.errors}")
                continue
            except StudentRecordsError as e:
                print(f"Error: {e}")
                sys.exit(1)
            created += 1
            print(f"  ✅ #{student.id} {student.first_name} {student.last_name} ({student.course})")

    print()
    print("=" * 60)
    print(f"  Created:   {created}")
    print(f"  Rejected:  {rejected}")
    print("=" * 60)


if __name__ == "__main__":
    main()
