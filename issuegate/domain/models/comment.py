"""Issue comment model."""

from pydantic import BaseModel, ConfigDict, Field


class Comment(BaseModel):
    """A single comment from the tracking issue.

    Comments are immutable once fetched. ``order`` is the position in the
    issue history; resolution replays comments in ascending order.
    """

    model_config = ConfigDict(frozen=True)

    author: str
    body: str = ""
    order: int = Field(default=0, ge=0)
