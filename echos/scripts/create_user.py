"""
Create a user directly in the directory (e.g. the first admin). Run from project root:
  python -m echos.scripts.create_user PSEUDONYME PASSWORD [role]
Example:
  python -m echos.scripts.create_user admin 'S3cure!pass' admin

Public signup always creates 'user' accounts, so this is how admins are bootstrapped.
"""
import argparse
import logging
import sys

from echos.core.database import SessionLocal
from echos.core.errors import AlreadyExistsError
from echos.core.permissions import ROLES
from echos.core.security import (
    PASSWORD_POLICY_MESSAGE,
    PSEUDONYME_MAX_LEN,
    hash_password,
    normalize_pseudonyme,
    password_meets_policy,
)
from echos.services.directory import UserDirectory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Echos user (admin bootstrap).")
    parser.add_argument("pseudonyme", help=f"Pseudonyme (1-{PSEUDONYME_MAX_LEN} chars)")
    parser.add_argument("password", help="Password (8-128 chars, letter, digit and special)")
    parser.add_argument("role", nargs="?", default="user", choices=sorted(ROLES))
    parser.add_argument("--name", default=None, help="Display name")
    args = parser.parse_args(argv)

    pseudonyme = normalize_pseudonyme(args.pseudonyme)
    if not pseudonyme or len(pseudonyme) > PSEUDONYME_MAX_LEN:
        print("Invalid pseudonyme length.", file=sys.stderr)
        return 1
    if not password_meets_policy(args.password):
        print(PASSWORD_POLICY_MESSAGE, file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        directory = UserDirectory(db)
        user = directory.create(
            {
                "pseudonyme": pseudonyme,
                "password_hash": hash_password(args.password),
                "role": args.role,
                "name": args.name,
            }
        )
        logger.info("Created user '%s' (id=%s) with role '%s'.", pseudonyme, user.id, args.role)
        return 0
    except AlreadyExistsError:
        print(f"User '{pseudonyme}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
