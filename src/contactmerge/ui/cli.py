from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from contactmerge.adapters.sqlalchemy.unit_of_work import startup
from contactmerge.app import create_user, describe_contact, merge_user_contact
from contactmerge.config import configure_logging, get_contact_manager_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile tracked contacts with users")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    db = subparsers.add_parser("db", help="Database management commands")
    db_sub = db.add_subparsers(dest="db_command", required=True)
    db_sub.add_parser("upgrade", help="Apply pending schema migrations")

    user = subparsers.add_parser("user", help="User management commands")
    user_sub = user.add_subparsers(dest="user_command", required=True)
    user_create = user_sub.add_parser("create", help="Create a user")
    user_create.add_argument(
        "--user-name",
        type=str,
        required=True,
        help="User name (stored normalized)",
    )
    user_create.add_argument(
        "--email",
        type=str,
        help="Email address; required before the user's contacts can be merged",
    )

    merge = subparsers.add_parser("merge", help="Merge a visitor contact into a user's contact")
    merge.add_argument("--user-name", type=str, required=True, help="User to merge for")
    merge.add_argument(
        "--contact-id",
        type=str,
        help="Contact the visitor is currently tracked as (defaults to a new contact)",
    )

    contact = subparsers.add_parser("contact", help="Contact inspection commands")
    contact_sub = contact.add_subparsers(dest="contact_command", required=True)
    contact_show = contact_sub.add_parser("show", help="Show a contact")
    lookup = contact_show.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--email", type=str, help="Look up the contact by email")
    lookup.add_argument("--id", type=str, dest="contact_id", help="Look up the contact by id")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    contact_id: UUID | None = None
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        raw_contact_id = getattr(parsed_args, "contact_id", None)
        if raw_contact_id is not None:
            contact_id = _parse_uuid(raw_contact_id)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "db" and parsed_args.db_command == "upgrade":
            startup()
            log.info("Database schema is up to date")
        elif parsed_args.command == "user" and parsed_args.user_command == "create":
            user = create_user(user_name=parsed_args.user_name, email=parsed_args.email)
            log.info("Created user %s", user.id)
        elif parsed_args.command == "merge":
            result = merge_user_contact(
                user_name=parsed_args.user_name,
                contact_id=contact_id,
                config=get_contact_manager_config(),
            )
            log.info("Current contact for %s: %s", parsed_args.user_name, result)
        elif parsed_args.command == "contact" and parsed_args.contact_command == "show":
            summary = describe_contact(email=parsed_args.email, contact_id=contact_id)
            if summary is None:
                log.info("No contact found")
            else:
                log.info(
                    "Contact %s: email=%s, anonymous=%s, merged_into=%s, users=%s, activities=%s",
                    summary.id,
                    summary.email,
                    summary.is_anonymous,
                    summary.merged_into_id,
                    ", ".join(summary.user_names) or "-",
                    summary.activity_count,
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
