"""
Create a user (e.g. the first admin_pusat). Run from project root:
  python -m sumbar_api.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m sumbar_api.scripts.create_user admin admin@sumbarprov.go.id your-secure-password admin_pusat
"""
import argparse
import logging
import sys

from pydantic import ValidationError
from sqlalchemy import select

from sumbar_api.core.database import SessionLocal
from sumbar_api.models import Role, RoleName
from sumbar_api.schemas.user import UserCreate
from sumbar_api.services.users import UserServiceError, create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sumbar API user (bootstrap the first admin).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.ADMIN_PUSAT.value,
        choices=[r.value for r in RoleName],
    )
    parser.add_argument("--region-id", type=int, default=None, help="Optional region id")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        role = db.execute(select(Role).where(Role.name == args.role)).scalars().first()
        if role is None:
            logger.error("Role '%s' is not seeded; run migrations first.", args.role)
            return 1
        try:
            data = UserCreate(
                username=args.username,
                email=args.email,
                password=args.password,
                role_id=role.id,
                region_id=args.region_id,
            )
        except ValidationError as e:
            logger.error("Invalid user data: %s", e.errors()[0].get("msg"))
            return 1
        try:
            user = create_user(db, data)
        except UserServiceError as e:
            logger.error("Could not create user: %s", e.message)
            return 1
        logger.info("Created user '%s' (id=%s) with role '%s'.", user.username, user.id, args.role)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
