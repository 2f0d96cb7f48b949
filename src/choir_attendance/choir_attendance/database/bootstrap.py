from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

LOGGER = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "admin@choir.local"
DEMO_MEMBER_EMAIL = "member@choir.local"
DEMO_MEMBER_ID = "m-demo-0001"


def _connection(db_config: dict, *, with_database: bool = True):
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the SQL file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    count = 0
    with closing(_connection(db_config)) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(_connection(db_config, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    n = _run_script(db_config, schema_path)
    LOGGER.info("applied %d schema statement(s) from %s", n, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    n = _run_script(db_config, seed_path)
    LOGGER.info("applied %d seed statement(s) from %s", n, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) one admin and one member login for local use."""
    with closing(_connection(db_config)) as conn:
        cur = conn.cursor(dictionary=True)

        def upsert_user(email: str, password: str, role: str, member_id) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET password_hash=%s, role=%s, member_id=%s, is_active=1 WHERE email=%s",
                    (password_hash, role, member_id, email),
                )
            else:
                cur.execute(
                    "INSERT INTO users (email, password_hash, role, member_id) VALUES (%s, %s, %s, %s)",
                    (email, password_hash, role, member_id),
                )

        cur.execute("SELECT member_id FROM members WHERE member_id=%s", (DEMO_MEMBER_ID,))
        linked = DEMO_MEMBER_ID if cur.fetchone() else None

        upsert_user(DEMO_ADMIN_EMAIL, "admin123", "admin", None)
        upsert_user(DEMO_MEMBER_EMAIL, "member123", "member", linked)
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    with closing(_connection(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def schema_tables(sql: str) -> list[str]:
    """Table names created by a schema script, in file order."""
    found = re.findall(r"(?i)CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?`?(\w+)`?", _strip_comments(sql))
    return list(dict.fromkeys(found))


def missing_tables(db_config: dict, *, schema_path: str | Path) -> list[str]:
    expected = schema_tables(Path(schema_path).read_text(encoding="utf-8"))
    present = {t.lower() for t in list_tables(db_config)}
    return [t for t in expected if t.lower() not in present]
