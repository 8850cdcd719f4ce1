from typing import Annotated, Optional

from pydantic import BaseModel, Field

Name = Annotated[str, Field(min_length=1, max_length=255)]


class CreateCourse(BaseModel):
    course_name: Name
    description: Optional[str] = None
    level: Optional[str] = None
    is_free: bool = False


class UpdateCourse(BaseModel):
    course_name: Optional[Name] = None
    description: Optional[str] = None
    level: Optional[str] = None
    is_free: Optional[bool] = None


class CreateLesson(BaseModel):
    course_id: int
    lesson_name: Name
    description: Optional[str] = None
    video_url: Optional[str] = None
    picture_url: Optional[str] = None
    is_free: bool = False


class UpdateLesson(BaseModel):
    course_id: Optional[int] = None
    lesson_name: Optional[Name] = None
    description: Optional[str] = None
    video_url: Optional[str] = None
    picture_url: Optional[str] = None
    is_free: Optional[bool] = None


class CreateResource(BaseModel):
    lesson_id: int
    title: Name
    resource_type: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None


class UpdateResource(BaseModel):
    lesson_id: Optional[int] = None
    title: Optional[Name] = None
    resource_type: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
