from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print month-to-date revenue against the on-pace target."
    )
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file.",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Report date (YYYY-MM-DD). Defaults to today in BUSINESS_TIMEZONE.",
    )
    parser.add_argument(
        "--location",
        default="combined",
        choices=["location_a", "location_b", "combined"],
        help="Restrict targets to one location.",
    )
    parser.add_argument(
        "--check-data",
        action="store_true",
        help="Also report missing working days and integrity findings.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))

    from src.api.dependencies import get_attainment_service
    from src.core.config import get_settings
    from src.core.logging import configure_logging
    from src.models.revenue import Location

    configure_logging(get_settings().log_level)
    service = get_attainment_service()
    as_of = service.resolve_as_of(args.as_of)
    report = {"pace": service.get_pace_metrics(as_of, Location(args.location)).model_dump(by_alias=True)}
    if args.check_data:
        report["missingDays"] = service.get_missing_data_days(as_of).model_dump(by_alias=True)
        report["integrity"] = service.get_data_integrity(as_of).model_dump(by_alias=True)
    print(json.dumps(report, indent=2, default=str))


if __name__ == "__main__":
    main()
