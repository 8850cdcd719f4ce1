from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

ModelName = Annotated[str, Field(min_length=1, max_length=255)]


class _ModelFields(BaseModel):
    # các trường model_name / model_id trùng tiền tố "model_" của pydantic
    model_config = ConfigDict(protected_namespaces=())


class CreateAIModel(_ModelFields):
    model_name: ModelName
    version: Optional[str] = None
    description: Optional[str] = None


class UpdateAIModel(_ModelFields):
    model_name: Optional[ModelName] = None
    version: Optional[str] = None
    description: Optional[str] = None


class CreateHandMotion(_ModelFields):
    lesson_id: int
    model_id: int
    motion_data: Annotated[str, Field(min_length=1)]
    description: Optional[str] = None


class UpdateHandMotion(_ModelFields):
    lesson_id: Optional[int] = None
    model_id: Optional[int] = None
    motion_data: Optional[Annotated[str, Field(min_length=1)]] = None
    description: Optional[str] = None
