"""
Start-up Initialization Script

Saves default settings on first run and migrates legacy plaintext user
passwords to hashes for the configured database.
"""
import argparse
import os
import sys
from dataclasses import replace

from dotenv import load_dotenv
from loguru import logger

sys.path.append(os.getcwd())

load_dotenv()

logger.remove()
logger.add(sys.stderr, level="INFO")

from kitcheckout.config import get_app_settings
from kitcheckout.services import ServiceContainer


def main(database_url: str = None) -> int:
    settings = get_app_settings()
    if database_url:
        settings = replace(settings, database_url=database_url)

    container = ServiceContainer(settings)
    migrated = container.ensure_init()

    print(f"Migrated {migrated} legacy user record(s).")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize storage and migrate legacy users")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args()

    sys.exit(main(args.database_url))
