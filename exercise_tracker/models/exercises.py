# exercise_tracker/models/exercises.py

from typing import List

from pydantic import BaseModel, Field


class ExerciseOut(BaseModel):
    """
    A freshly logged exercise, merged with its owner's identity.
    """
    id: str = Field(alias="_id")
    username: str
    description: str
    duration: int
    date: str

    class Config:
        populate_by_name = True


class LogEntry(BaseModel):
    description: str
    duration: int
    date: str


class ExerciseLogOut(BaseModel):
    id: str = Field(alias="_id")
    username: str
    count: int
    log: List[LogEntry]

    class Config:
        populate_by_name = True
