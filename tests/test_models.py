"""ORM mapping checks: mappers configure and the tables compile for Postgres."""

from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import configure_mappers
from sqlalchemy.schema import CreateTable

from seatbook.db.base import Base


def test_mappers_configure():
    configure_mappers()


def test_expected_tables_registered():
    assert {
        "users",
        "seat_rows",
        "row_seats",
        "bookings",
        "seat_assignments",
        "settings",
    } <= set(Base.metadata.tables)


def test_tables_compile_for_postgres():
    dialect = postgresql.dialect()
    for table in Base.metadata.sorted_tables:
        ddl = str(CreateTable(table).compile(dialect=dialect))
        assert table.name in ddl


def test_row_seat_number_unique_per_row():
    table = Base.metadata.tables["row_seats"]
    ddl = str(CreateTable(table).compile(dialect=postgresql.dialect()))
    assert "UNIQUE (seat_row_id, seat_number)" in ddl
