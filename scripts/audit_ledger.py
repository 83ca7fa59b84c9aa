"""
Ledger Audit Script

Checks every equipment item against its open loans and prints any
discrepancies. Exits non-zero when the ledger is inconsistent.
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
logger.add(sys.stderr, level="WARNING")

from kitcheckout.config import get_app_settings
from kitcheckout.services import ServiceContainer


def main(database_url: str = None) -> int:
    settings = get_app_settings()
    if database_url:
        settings = replace(settings, database_url=database_url)

    report = ServiceContainer(settings).reports.audit()

    if report.ok:
        print("Ledger consistent.")
        return 0

    for item in report.discrepancies:
        print(
            f"[{item.equipment_id}] {item.name}: total={item.total} "
            f"avail={item.avail} on_loan={item.on_loan}"
        )
        for issue in item.issues:
            print(f"    - {issue}")

    for log in report.orphaned_loans:
        print(f"Open loan {log.id} ({log.email}) references missing equipment {log.equipment_id}")

    return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Audit the lending ledger")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args()

    sys.exit(main(args.database_url))
