import asyncio
import os
import sys
from pathlib import Path

"""
Seed a demo catalogue (products, colours, a few IN/OUT movements) and a
demo login into the database.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`

Optional env vars:
- DEMO_EMAIL (default: demo@example.com)
- DEMO_PASSWORD (default: demo1234)
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select  # noqa: E402

from core.errors import DuplicateError  # noqa: E402
from core.logging_config import configure_logging  # noqa: E402
from db.access import DataAccess  # noqa: E402
from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.models import User  # noqa: E402
from services import catalog  # noqa: E402
from services.reconciliation import MovementRequest, ReconciliationService  # noqa: E402

from fastapi_users.password import PasswordHelper  # noqa: E402


password_helper = PasswordHelper()

# sku -> (name, {colour: opening stock})
DEMO_CATALOGUE = {
    "TS-001": ("Basic T-Shirt", {"White": 24, "Black": 18, "Navy": 4}),
    "HD-010": ("Zip Hoodie", {"Grey": 9, "Black": 0}),
    "CP-200": ("Baseball Cap", {"Red": 12, "Orange": 3}),
}


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )
    session.add(user)
    await session.commit()
    return user


async def main() -> None:
    configure_logging("INFO")
    await create_db_and_tables()

    async with async_session_maker() as session:
        user = await get_or_create_user(
            session,
            os.getenv("DEMO_EMAIL", "demo@example.com"),
            os.getenv("DEMO_PASSWORD", "demo1234"),
        )
        access = DataAccess(session)
        service = ReconciliationService(access)

        opening = []
        for sku, (name, colours) in DEMO_CATALOGUE.items():
            try:
                product = await catalog.create_product(access, sku, name)
            except DuplicateError:
                print(f"{sku} already seeded, skipping")
                continue
            for colour, qty in colours.items():
                line = await catalog.add_color(access, product["id"], colour)
                if qty > 0:
                    opening.append(MovementRequest(line["id"], qty, "IN", "Opening stock"))

        if opening:
            applied = await service.apply_batch(opening, user_id=user.id)
            print(f"Seeded {len(applied)} opening movements")


if __name__ == "__main__":
    asyncio.run(main())
