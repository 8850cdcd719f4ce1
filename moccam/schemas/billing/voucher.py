import datetime
import decimal
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, model_validator

from moccam.libs.formats.datetime import to_vietnam_naive

# lưu naive theo UTC+7 như toàn bộ dự án
LocalDateTime = Annotated[datetime.datetime, AfterValidator(to_vietnam_naive)]


class CreateVoucher(BaseModel):
    description: Annotated[str, Field(min_length=1)]
    discount_value: Annotated[decimal.Decimal, Field(gt=0)]
    max_usage: Annotated[int, Field(gt=0)]
    start_date: LocalDateTime
    end_date: LocalDateTime

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date phải trước end_date")
        return self


class UpdateVoucher(BaseModel):
    description: Optional[str] = None
    discount_value: Optional[Annotated[decimal.Decimal, Field(gt=0)]] = None
    max_usage: Optional[Annotated[int, Field(gt=0)]] = None
    start_date: Optional[LocalDateTime] = None
    end_date: Optional[LocalDateTime] = None
