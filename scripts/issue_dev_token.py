"""Utility script to create a profile and print a development access token."""

from __future__ import annotations

import argparse
from datetime import timedelta
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from takurabid.application.use_cases.profiles import (
    ProfileAlreadyExistsError,
    create_profile,
    get_profile_by_auth_id,
)
from takurabid.config import get_settings
from takurabid.domain.entities import UserType
from takurabid.infrastructure.database import open_database
from takurabid.infrastructure.security import create_identity_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token issuance."""

    parser = argparse.ArgumentParser(
        description="Create a TakuraBid profile and sign a token for it with JWT_SECRET.",
    )
    parser.add_argument(
        "--auth-id",
        default=None,
        help="Identity reference (token subject). A random one is generated when omitted.",
    )
    parser.add_argument("--name", default="Demo Driver", help="Profile display name")
    parser.add_argument(
        "--type",
        choices=[member.value for member in UserType],
        default=UserType.DRIVER.value,
        help="Marketplace role of the profile (default: driver)",
    )
    parser.add_argument("--email", default=None, help="Email claim to include in the token")
    parser.add_argument(
        "--hours",
        type=int,
        default=12,
        help="Token lifetime in hours (default: 12)",
    )
    return parser.parse_args()


def main() -> None:
    """Create (or reuse) the profile and print its token."""

    args = parse_args()
    settings = get_settings()
    auth_id = args.auth_id or str(uuid4())

    with open_database(settings) as database, database.session() as session:
        try:
            profile = create_profile(
                session,
                auth_id=auth_id,
                user_type=UserType(args.type),
                name=args.name,
                email=args.email,
            )
        except ProfileAlreadyExistsError:
            profile = get_profile_by_auth_id(session, auth_id)
        except ValueError as exc:
            raise SystemExit(f"Could not create the profile: {exc}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise SystemExit(f"Error saving the profile: {exc}") from exc

    token = create_identity_token(
        settings,
        auth_id,
        email=args.email,
        expires_delta=timedelta(hours=args.hours),
    )
    print(
        "Profile ready:\n"
        f"  ID: {profile.id}\n"
        f"  Auth ID: {auth_id}\n"
        f"  Type: {profile.type.value}\n"
        f"  Name: {profile.name}\n"
        f"Token:\n{token}"
    )


if __name__ == "__main__":
    main()
