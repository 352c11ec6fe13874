"""Create the customers, repairs and settings tables, or print their DDL.

    python -m apps.sync.bootstrap            # create tables on DATABASE_URL
    python -m apps.sync.bootstrap --print    # print the PostgreSQL setup script
"""
import sys

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateTable

import apps.customers.models  # noqa: F401
import apps.repairs.models  # noqa: F401
import apps.settings.models  # noqa: F401
from core.database import Base, build_engine, settings

DIALECTS = {
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
}


def render_setup_script(dialect_name: str = "postgresql") -> str:
    if dialect_name not in DIALECTS:
        raise ValueError(f"Unsupported dialect '{dialect_name}'")
    dialect = DIALECTS[dialect_name]()
    statements = [
        f"{str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)).strip()};"
        for table in Base.metadata.sorted_tables
    ]
    header = "-- COMPUSYS POINT DATABASE SETUP SCRIPT\n-- Creates all required tables\n"
    return header + "\n\n".join(statements) + "\n"


def create_tables(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if "--print" in argv:
        print(render_setup_script())
        return

    if not settings.is_configured:
        print("DATABASE_URL is not set; nothing to create.")
        sys.exit(1)
    create_tables(build_engine(settings.DATABASE_URL))
    print("Tables created: " + ", ".join(t.name for t in Base.metadata.sorted_tables))


if __name__ == "__main__":
    main()
