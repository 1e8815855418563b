"""Identity schemas for the current session."""

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    username: str
    role: str
    can_assign: bool
    can_view_assignee: bool

    model_config = ConfigDict(from_attributes=True)
