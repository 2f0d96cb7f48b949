"""Create the choir database and its tables from database/schema.sql.

    python scripts/init_db.py            # schema only
    python scripts/init_db.py --seed     # schema, seed rows and demo logins
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.choir_attendance.choir_attendance.database.bootstrap import (
    DEMO_ADMIN_EMAIL,
    apply_schema,
    apply_seed_sql,
    ensure_demo_users,
    missing_tables,
)

LOGGER = logging.getLogger("init_db")

SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"
SEED_PATH = REPO_ROOT / "database" / "seed.sql"


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialise the choir attendance database.")
    parser.add_argument("--seed", action="store_true", help="also load seed.sql and the demo logins")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('database')} on {db_config.get('host')}:{db_config.get('port', 3306)}"

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    missing = missing_tables(db_config, schema_path=SCHEMA_PATH)
    if missing:
        LOGGER.error("schema applied to %s but tables are missing: %s", target, ", ".join(missing))
        return 1

    if args.seed:
        apply_seed_sql(db_config, seed_path=SEED_PATH)
        ensure_demo_users(db_config)
        LOGGER.info("seeded %s (admin login: %s)", target, DEMO_ADMIN_EMAIL)

    LOGGER.info("choir database ready: %s", target)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
