from typing import Annotated, Optional

from pydantic import BaseModel, Field

Rate = Annotated[int, Field(ge=1, le=5)]


class CreateComment(BaseModel):
    lesson_id: int
    comment: Annotated[str, Field(min_length=1)]
    rate: Optional[Rate] = None


class UpdateComment(BaseModel):
    comment: Optional[Annotated[str, Field(min_length=1)]] = None
    rate: Optional[Rate] = None
