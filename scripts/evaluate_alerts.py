"""Run one alert evaluation pass from the command line."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from pfm_api.application.alerts import build_alert_dispatcher
from pfm_api.config import get_settings
from pfm_api.infrastructure.database import SessionLocal, initialize_database
from pfm_api.infrastructure.repositories import TransactionRepository


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for an evaluation pass."""

    parser = argparse.ArgumentParser(
        description="Evaluate alert rules once and record any notifications.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    batch = subparsers.add_parser(
        "batch", help="Check account threshold, goal and spending alerts of a user."
    )
    batch.add_argument("--user-id", type=int, required=True, help="Owner of the alerts")

    bills = subparsers.add_parser("bills", help="Check upcoming bill alerts of a user.")
    bills.add_argument("--user-id", type=int, required=True, help="Owner of the alerts")

    transaction = subparsers.add_parser(
        "transaction",
        help="Check merchant and transaction limit alerts against one transaction.",
    )
    transaction.add_argument(
        "--transaction-id", type=int, required=True, help="Transaction to check"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run the requested evaluation and print what fired."""

    args = parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_database()

    session = SessionLocal()
    try:
        dispatcher = build_alert_dispatcher(session)
        if args.command == "transaction":
            transaction = TransactionRepository(session).get(args.transaction_id)
            if transaction is None:
                raise SystemExit(f"Transaction {args.transaction_id} not found.")
            notifications = dispatcher.evaluate_transaction(transaction)
        elif args.command == "bills":
            notifications = dispatcher.evaluate_upcoming_bills(args.user_id).notifications
        else:
            notifications = dispatcher.evaluate_all_user_alerts(args.user_id).notifications
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error during evaluation: {exc}") from exc
    finally:
        session.close()

    print(f"{len(notifications)} notification(s) created")
    for notification in notifications:
        print(f"  [{notification.id}] {notification.title}: {notification.message}")


if __name__ == "__main__":
    main()
