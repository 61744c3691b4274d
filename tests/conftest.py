"""Shared fixtures.

Every test gets a fresh in-memory SQLite database (``StaticPool`` keeps the
single connection alive across sessions and threads) and a fixed clock.
Clubs X and Y each have one coach; club X has an active member, a
not-yet-approved member, and club Y has an active member.
"""

import os

# Must be set before ``app`` builds its engine.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

import datetime
from dataclasses import dataclass

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.db.base  # noqa: F401
from app.core.clock import fixed, utcnow
from app.models.attendance import AttendanceRecord, AttendanceStatus, CheckInMethod
from app.models.club import Club
from app.models.coach import Coach
from app.models.member import AccessFlag, Member
from app.models.training_session import TrainingSession
from app.schemas.actor import Actor, Role

NOW = datetime.datetime(2025, 2, 27, 9, 0)

PERSONAL_INFO = {
    "full_name": "Somchai Jaidee",
    "nickname": "Chai",
    "gender": "male",
    "date_of_birth": "2001-04-12",
    "phone_number": "081-234-5678",
    "address": "99/1 Sukhumvit Road, Bangkok 10110",
    "emergency_contact": "089-876-5432",
    "blood_type": "O",
    "medical_conditions": "Mild asthma",
}


def documents() -> list[dict]:
    return [
        {"type": doc_type, "url": f"https://files.example.com/{doc_type}.pdf", "file_name": f"{doc_type}.pdf",
         "file_size": 120_000, "uploaded_at": "2025-02-20T08:00:00"}
        for doc_type in ("id_card", "house_registration", "birth_certificate")
    ]


# ======================================================================
# Database
# ======================================================================


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock():
    return fixed(NOW)


# ======================================================================
# World
# ======================================================================


@dataclass
class World:
    club_x: Club
    club_y: Club
    coach_x: Coach
    coach_y: Coach
    member_x: Member
    newcomer_x: Member
    member_y: Member


def _add(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def world(db) -> World:
    club_x = _add(db, Club(name="Club X Swimming", sport_category="swimming"))
    club_y = _add(db, Club(name="Club Y Athletics", sport_category="athletics"))
    return World(
        club_x=club_x,
        club_y=club_y,
        coach_x=_add(db, Coach(identity_id="coach-x", club_id=club_x.id, full_name="Coach X")),
        coach_y=_add(db, Coach(identity_id="coach-y", club_id=club_y.id, full_name="Coach Y")),
        member_x=_add(db, Member(identity_id="member-x", club_id=club_x.id, access_flag=AccessFlag.active.value)),
        newcomer_x=_add(db, Member(identity_id="newcomer-x", club_id=club_x.id)),
        member_y=_add(db, Member(identity_id="member-y", club_id=club_y.id, access_flag=AccessFlag.active.value)),
    )


# ======================================================================
# Actors
# ======================================================================


def admin_actor() -> Actor:
    return Actor(identity_id="admin-1", role=Role.admin)


def coach_actor(coach: Coach) -> Actor:
    return Actor(identity_id=coach.identity_id, role=Role.coach, club_id=coach.club_id, coach_id=coach.id)


def member_actor(member: Member) -> Actor:
    return Actor(identity_id=member.identity_id, role=Role.member, club_id=member.club_id, member_id=member.id)


# ======================================================================
# Rows
# ======================================================================


def make_session(db: Session, coach: Coach, session_date: datetime.date = datetime.date(2025, 3, 1),
                 start: datetime.time = datetime.time(10, 0), end: datetime.time = datetime.time(11, 0),
                 **overrides) -> TrainingSession:
    values = dict(club_id=coach.club_id, coach_id=coach.id, title="Morning swim", session_date=session_date,
                  start_time=start, end_time=end, location="Pool A")
    values.update(overrides)
    return _add(db, TrainingSession(**values))


def make_record(db: Session, entry: TrainingSession, member: Member, status: AttendanceStatus,
                **overrides) -> AttendanceRecord:
    values = dict(session_id=entry.id, member_id=member.id, club_id=entry.club_id, status=status.value,
                  check_in_method=CheckInMethod.manual.value, created_at=utcnow(), updated_at=utcnow())
    values.update(overrides)
    return _add(db, AttendanceRecord(**values))
