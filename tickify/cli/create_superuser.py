import argparse
import getpass
import logging
import sys

from pydantic import ValidationError

from tickify.core.config import get_settings
from tickify.core.errors import AppError
from tickify.core.logging import configure_logging
from tickify.models.schemas.user import RegisterRequest
from tickify.repositories.user_repository import UserRepository
from tickify.services.user_service import UserService

logger = logging.getLogger("tickify.create_superuser")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickify-create-superuser",
        description="Create an active administrator account.",
    )
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", help="Prompted for when omitted.")
    parser.add_argument("--email")
    parser.add_argument("--first-name", dest="first_name")
    parser.add_argument("--last-name", dest="last_name")
    parser.add_argument("--database-url", dest="database_url")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    password = args.password or getpass.getpass("Password: ")
    try:
        payload = RegisterRequest(
            username=args.username,
            email=args.email,
            password=password,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except ValidationError as exc:
        for issue in exc.errors():
            field = ".".join(str(part) for part in issue["loc"])
            logger.error("Invalid %s: %s", field, issue["msg"])
        return 1

    service = UserService(user_repository=UserRepository(), database_url=args.database_url)
    try:
        user = service.create_superuser(payload)
    except AppError as exc:
        logger.error("Superuser not created: %s", exc.message)
        return 1

    logger.info("Superuser %s created with id %s", user.username, user.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
