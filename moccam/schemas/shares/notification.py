from typing import Optional

from pydantic import BaseModel, Field


class NotificationCreateSchema(BaseModel):
    """
    Schema tạo thông báo mới.
    - user_id = None → thông báo chung cho mọi khách hàng
    """

    user_id: Optional[int] = Field(
        default=None, description="ID người nhận thông báo (nếu gửi riêng)"
    )
    title: str = Field(..., min_length=1, description="Tiêu đề thông báo")
    message: str = Field(..., min_length=1, description="Nội dung thông báo")
    type: Optional[str] = Field(
        default="system", description="Loại thông báo (system, payment, course, ...)"
    )
