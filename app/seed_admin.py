"""
Create (or promote) the club administrator account.

    python -m app.seed_admin --email admin@example.com --password s3cretpass

Missing flags fall back to the ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME
settings.
"""

import argparse
import sys

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging import setup_logger
from app.services import user_service
import app.models  # noqa: F401  registers tables

logger = setup_logger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ensure the club administrator account exists.")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        message = user_service.ensure_admin(db, email=args.email, password=args.password, name=args.name)
    except ValueError as e:
        logger.error(str(e))
        return 1
    finally:
        db.close()
    logger.info(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
