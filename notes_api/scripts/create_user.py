"""
Create a user with explicit roles (e.g. the first Admin). Run from project root:
  python -m notes_api.scripts.create_user USERNAME EMAIL PASSWORD [ROLE ...]
Example:
  python -m notes_api.scripts.create_user admin1 admin@example.com your-secure-password Admin Manager
"""
import argparse
import sys

from pydantic import ValidationError

from notes_api.core.config import get_settings
from notes_api.core.database import Database
from notes_api.core.errors import ConflictError
from notes_api.schemas.user import UserCreate
from notes_api.services.users import create_user


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Notes API user with roles.")
    parser.add_argument("username", help="Username (5-255 chars)")
    parser.add_argument("email", help="E-mail address")
    parser.add_argument("password", help="Password (5-128 chars)")
    parser.add_argument("roles", nargs="*", help="Role labels (default: Employee)")
    args = parser.parse_args(argv)

    try:
        data = UserCreate(
            username=args.username,
            email=args.email,
            password=args.password,
            roles=args.roles or None,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        print(f"Invalid {field}: {first['msg']}", file=sys.stderr)
        return 1

    database = database or Database(get_settings().DATABASE_URL)
    database.create_all()
    db = database.session()
    try:
        user = create_user(db, data)
    except ConflictError:
        print(f"User '{data.username}' or email '{data.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with roles {', '.join(user.roles)}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
