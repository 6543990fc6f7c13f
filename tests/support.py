"""Shared constants and helpers for the API tests."""

from datetime import datetime, timezone

from security import create_access_token

OWNER_ID = "u1"
OTHER_ID = "u2"
ADMIN_ID = "admin1"

SEED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

# Twelve providers with distinct ratings 0.4, 0.8, ... 4.8.
# Every third one is inactive; the first eight belong to OWNER_ID.
PROVIDERS = [
    {
        "id": f"p{i:02d}",
        "user": OWNER_ID if i <= 8 else OTHER_ID,
        "name": f"Provider {i:02d}",
        "rating": round(i * 0.4, 1),
        "status": "inactive" if i % 3 == 0 else "active",
        "is_verified": i % 2 == 0,
    }
    for i in range(1, 13)
]


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}
