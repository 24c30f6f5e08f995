# exercise_tracker/models/users.py

from pydantic import BaseModel, Field


class UserOut(BaseModel):
    username: str
    id: str = Field(alias="_id")

    class Config:
        from_attributes = True
        populate_by_name = True
