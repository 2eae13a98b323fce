import argparse
import asyncio
import getpass
import sys
from pathlib import Path

"""
Create an admin account from the command line.

Run:
- inside backend/: `python scripts/create_admin.py --email boss@barstock.com --name Boss`
- from repo root: `python backend/scripts/create_admin.py --email boss@barstock.com --name Boss`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from fastapi_users.db import SQLAlchemyUserDatabase  # noqa: E402
from fastapi_users.exceptions import InvalidPasswordException, UserAlreadyExists  # noqa: E402

from core.auth import UserManager  # noqa: E402
from core.permissions import ROLES, ROLE_ADMIN  # noqa: E402
from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.users import User  # noqa: E402
from schemas.users import UserCreate  # noqa: E402


async def create_user(*, email: str, name: str, password: str, role: str) -> int:
    await create_db_and_tables()
    async with async_session_maker() as session:
        manager = UserManager(SQLAlchemyUserDatabase(session, User))
        try:
            user = await manager.create(
                UserCreate(
                    email=email,
                    password=password,
                    name=name,
                    role=role,
                    is_superuser=(role == ROLE_ADMIN),
                ),
                safe=False,
            )
        except UserAlreadyExists:
            print(f"[create_admin] user {email} already exists", file=sys.stderr)
            return 1
        except InvalidPasswordException as e:
            print(f"[create_admin] {e.reason}", file=sys.stderr)
            return 1

    print(f"[create_admin] created {role} {user.email} id={user.id}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--role", default=ROLE_ADMIN, choices=ROLES)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    sys.exit(asyncio.run(create_user(email=args.email, name=args.name, password=password, role=args.role)))
