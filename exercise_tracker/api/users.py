# exercise_tracker/api/users.py

import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from exercise_tracker.api.payload import read_payload
from exercise_tracker.db.engine import connect, get_engine
from exercise_tracker.db.schema import exercises, users
from exercise_tracker.errors import NotFoundError, ValidationError
from exercise_tracker.models.exercises import ExerciseLogOut, ExerciseOut, LogEntry
from exercise_tracker.models.users import UserOut
from exercise_tracker.parsing import (
    MAX_INT,
    OptionalDate,
    OptionalInt,
    is_blank,
    parse_date,
    parse_duration,
    to_date_string,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def insert_user_if_absent(conn: Connection, username: str):
    """
    Atomic insert-or-fetch by username, relying on the unique constraint
    rather than a lookup before the write.

    Returns the stored row mapping (id, username).
    """
    dialect = conn.dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = (
            insert(users)
            .values(username=username)
            .on_conflict_do_nothing(index_elements=[users.c.username])
        )
        result = conn.execute(stmt)
    else:
        # Savepoint so a duplicate does not poison the outer transaction
        try:
            with conn.begin_nested():
                result = conn.execute(users.insert().values(username=username))
        except IntegrityError:
            result = None

    if result is not None and result.rowcount == 1:
        logger.info("Created user %r", username)

    stmt = select(users.c.id, users.c.username).where(users.c.username == username)
    return conn.execute(stmt).mappings().one()


def _find_user(conn: Connection, user_id: str):
    stmt = select(users.c.id, users.c.username).where(users.c.id == user_id)
    row = conn.execute(stmt).mappings().first()

    if row is None:
        raise NotFoundError("User not found")
    return row


def _today(request: Request):
    return datetime.now(request.app.state.tz).date()


@router.post("", response_model=UserOut)
def create_user(
    payload: Dict[str, Any] = Depends(read_payload),
    engine: Engine = Depends(get_engine),
) -> UserOut:
    """
    Register a username; registering an existing one returns that user.
    """
    username = payload.get("username")
    if is_blank(username):
        raise ValidationError("Username is required")
    if isinstance(username, (dict, list)):
        raise ValidationError("Invalid username")

    username = str(username)

    with connect(engine, write=True) as conn:
        row = insert_user_if_absent(conn, username)

    return UserOut(id=row["id"], username=row["username"])


@router.get("", response_model=List[UserOut])
def list_users(engine: Engine = Depends(get_engine)) -> List[UserOut]:
    with connect(engine) as conn:
        rows = conn.execute(select(users.c.id, users.c.username)).mappings().all()

    return [UserOut(id=row["id"], username=row["username"]) for row in rows]


@router.post("/{user_id}/exercises", response_model=ExerciseOut)
def add_exercise(
    user_id: str,
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    engine: Engine = Depends(get_engine),
) -> ExerciseOut:
    """
    Log an exercise for a user. `date` defaults to today.
    """
    description = payload.get("description")
    duration = payload.get("duration")

    if is_blank(description) or is_blank(duration):
        raise ValidationError("Description and duration are required")
    if isinstance(description, (dict, list)):
        raise ValidationError("Invalid description")

    description = str(description)
    duration = parse_duration(duration)
    exercise_date = parse_date(payload.get("date")) or _today(request)

    with connect(engine, write=True) as conn:
        user = _find_user(conn, user_id)
        conn.execute(
            exercises.insert().values(
                user_id=user["id"],
                description=description,
                duration=duration,
                date=exercise_date,
            )
        )

    logger.info("Logged exercise for user %s on %s", user["id"], exercise_date)

    return ExerciseOut(
        id=user["id"],
        username=user["username"],
        description=description,
        duration=duration,
        date=to_date_string(exercise_date),
    )


@router.get("/{user_id}/logs", response_model=ExerciseLogOut)
def get_log(
    user_id: str,
    from_: OptionalDate = Query(
        default=None,
        alias="from",
        description="ISO date (YYYY-MM-DD), inclusive lower bound",
    ),
    to: OptionalDate = Query(
        default=None,
        description="ISO date (YYYY-MM-DD), inclusive upper bound",
    ),
    limit: OptionalInt = Query(
        default=None,
        ge=0,
        le=MAX_INT,
        description="Maximum number of entries; 0 or absent means all",
    ),
    engine: Engine = Depends(get_engine),
) -> ExerciseLogOut:
    """
    A user's exercises, optionally filtered by date range and capped by limit.
    """
    with connect(engine) as conn:
        user = _find_user(conn, user_id)

        conditions = [exercises.c.user_id == user["id"]]
        if from_ is not None:
            conditions.append(exercises.c.date >= from_)
        if to is not None:
            conditions.append(exercises.c.date <= to)

        stmt = (
            select(
                exercises.c.description,
                exercises.c.duration,
                exercises.c.date,
            )
            .where(*conditions)
        )
        if limit:
            stmt = stmt.limit(limit)

        rows = conn.execute(stmt).mappings().all()

    log = [
        LogEntry(
            description=row["description"],
            duration=row["duration"],
            date=to_date_string(row["date"]),
        )
        for row in rows
    ]

    return ExerciseLogOut(
        id=user["id"],
        username=user["username"],
        count=len(log),
        log=log,
    )
