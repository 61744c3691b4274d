"""Tests for table definitions shared by every model."""

import datetime

import pytest
from sqlalchemy import DateTime
from sqlmodel import SQLModel

import app.db.base  # noqa: F401
from app.models.club import Club

# ======================================================================
# Timestamps
# ======================================================================


def _datetime_columns():
    for table in SQLModel.metadata.sorted_tables:
        for column in table.columns:
            if isinstance(column.type, DateTime):
                yield f"{table.name}.{column.name}", column


class TestTimestampColumns:
    @pytest.mark.parametrize("name,column", list(_datetime_columns()))
    def test_stored_as_naive_datetime(self, name, column):
        assert column.type.timezone is False, name

    def test_every_table_has_created_at(self):
        for table in SQLModel.metadata.sorted_tables:
            assert isinstance(table.c.created_at.type, DateTime), table.name

    def test_naive_utc_timestamp_round_trips(self, db):
        stamp = datetime.datetime(2025, 2, 27, 2, 0)
        club = Club(name="Club Z", sport_category="judo", created_at=stamp, updated_at=stamp)
        db.add(club)
        db.commit()
        db.refresh(club)
        assert club.created_at == stamp
        assert club.created_at.tzinfo is None
