from __future__ import annotations

import sys
from pathlib import Path

import psycopg

REQUIRED_ENV = [
    "DATABASE_URL",
    "GORGIAS_WEBHOOK_SECRET",
]

REQUIRED_TABLES = ["agent_behavior_log", "processed_events", "pulse_checks"]


def _read_env_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    data: dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip()
    return data


def _missing_tables(database_url: str) -> list[str] | None:
    try:
        with psycopg.connect(database_url, connect_timeout=5) as conn:
            rows = conn.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_name = ANY(%s)",
                (REQUIRED_TABLES,),
            ).fetchall()
    except Exception:
        return None
    present = {row[0] for row in rows}
    return [t for t in REQUIRED_TABLES if t not in present]


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    env_data = _read_env_file(env_path)

    print("== Environment ==")
    if not env_path.exists():
        print("Missing .env (copy from .env.example)")
    else:
        missing = [k for k in REQUIRED_ENV if not env_data.get(k)]
        if missing:
            print(f"Missing env vars: {', '.join(missing)}")
        else:
            print("Env looks good")
        if env_data.get("AGENT_MESSAGE_FILTER_ENABLED", "").lower() not in {"1", "true", "yes"}:
            print("Note: agent message filter is off; every message source is logged")

    print("== Database ==")
    database_url = env_data.get("DATABASE_URL")
    if not database_url:
        print("Skipped (no DATABASE_URL)")
    else:
        missing_tables = _missing_tables(database_url)
        if missing_tables is None:
            print("Database unreachable")
        elif missing_tables:
            print(f"Missing tables: {', '.join(missing_tables)} (run `alembic upgrade head`)")
        else:
            print("Schema looks good")

    print("== Tooling ==")
    print(f"Python: {sys.version.split()[0]}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
