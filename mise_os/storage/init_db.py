# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Database Initialization — Create tables, optionally seed a demo restaurant.

    python -m mise_os.storage.init_db           # tables only
    python -m mise_os.storage.init_db --seed    # + demo restaurant, user, token
"""

import argparse
import asyncio

from mise_os.core.security import create_access_token
from mise_os.storage.database import close_db, create_all_tables, get_session_factory
from mise_os.storage.repositories import RestaurantRepository, UserRepository

# Ensure models are imported so Base.metadata knows about them
import mise_os.storage.models  # noqa: F401


async def seed_demo() -> str:
    """Create one restaurant with one owner; return an access token for them."""
    async with get_session_factory()() as db:
        restaurant = await RestaurantRepository(db).create("Demo Bistro", "demo-bistro")
        user = await UserRepository(db).create("owner@demo-bistro.test", "Demo Owner")
        await RestaurantRepository(db).add_staff(restaurant.id, user.id, role="owner")
        await db.commit()
        print(f"[init_db] Seeded restaurant {restaurant.id} ({restaurant.slug}), user {user.id}")
        return create_access_token(user.id)


async def main(seed: bool = False):
    print("[init_db] Creating tables...")
    await create_all_tables()
    if seed:
        token = await seed_demo()
        print(f"[init_db] Bearer token: {token}")
    print("[init_db] Done.")
    await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create Mise OS tables")
    parser.add_argument("--seed", action="store_true", help="insert a demo restaurant")
    args = parser.parse_args()
    asyncio.run(main(seed=args.seed))
