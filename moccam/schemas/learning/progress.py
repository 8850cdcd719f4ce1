from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from moccam.core.enum import ProgressStatus


def normalize_status(value: str) -> str:
    value = value.strip().lower()
    if value not in {s.value for s in ProgressStatus}:
        raise ValueError("status phải là not_started, in_progress hoặc completed")
    return value


StatusValue = Annotated[str, Field(min_length=1), AfterValidator(normalize_status)]


class SubmitProgress(BaseModel):
    lesson_id: int
    status: StatusValue


class UpdateProgressStatus(BaseModel):
    status: StatusValue
