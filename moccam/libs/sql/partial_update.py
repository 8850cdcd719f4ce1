from typing import Any, Callable, Optional, Set

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import Update, update
from sqlalchemy.orm import InstrumentedAttribute

Transform = Callable[[Any], Any]


class PartialUpdate:
    """Gom các cặp (cột, giá trị) có mặt và dựng câu UPDATE có tham số.

    Chỉ những trường client gửi lên (``exclude_unset``) mới được ghi; giá trị
    ``None`` gửi tường minh xoá dữ liệu của cột nullable và bị bỏ qua ở cột NOT NULL.
    """

    def __init__(self, model: type):
        self.model = model
        self._values: dict[str, Any] = {}

    def set(self, column: str | InstrumentedAttribute, value: Any) -> "PartialUpdate":
        key = column if isinstance(column, str) else column.key
        if not hasattr(self.model, key):
            raise ValueError(f"{self.model.__name__} has no column {key!r}")
        self._values[key] = value
        return self

    def merge(
        self,
        schema: BaseModel,
        transforms: dict[str, Transform] | None = None,
        exclude: Optional[Set[str]] = None,
    ) -> "PartialUpdate":
        transforms = transforms or {}
        for key, value in schema.model_dump(exclude_unset=True).items():
            if exclude and key in exclude:
                continue
            if value is None:
                column = self.model.__table__.c.get(key)
                # cột NOT NULL: bỏ qua null
                if column is not None and not column.nullable:
                    continue
            elif key in transforms:
                value = transforms[key](value)
            self.set(key, value)
        return self

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def statement(self, *where) -> Update:
        if not self._values:
            raise HTTPException(400, "Không có trường nào để cập nhật")
        return update(self.model).where(*where).values(**self._values)
