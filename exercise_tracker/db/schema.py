# exercise_tracker/db/schema.py

import secrets
import time

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Date, ForeignKey, CheckConstraint, Text
)

metadata = MetaData()


def new_object_id() -> str:
    """
    24 hex chars: 4-byte creation timestamp followed by 8 random bytes.
    """
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


users = Table(
    "users",
    metadata,
    Column("id", String(24), primary_key=True, default=new_object_id),
    Column("username", Text, nullable=False, unique=True),
)

exercises = Table(
    "exercises",
    metadata,
    Column("id", String(24), primary_key=True, default=new_object_id),
    Column("user_id", String(24), ForeignKey("users.id"), nullable=False, index=True),
    Column("description", Text, nullable=False),
    Column("duration", Integer, nullable=False),
    Column("date", Date, nullable=False),
    CheckConstraint("duration > 0", name="ck_exercises_duration_positive"),
)
