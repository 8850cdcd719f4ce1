import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from moccam.core.enum import UserRole

Password = Annotated[str, Field(min_length=6, max_length=72)]
PhoneNumber = Annotated[str, Field(min_length=8, max_length=20, pattern=r"^\+?[0-9]+$")]


class RegisterCustomer(BaseModel):
    email: EmailStr
    password: Password
    full_name: Annotated[str, Field(min_length=1, max_length=255)]
    phone_number: PhoneNumber
    date_of_birth: Optional[datetime.date] = None


class LoginUser(BaseModel):
    email: EmailStr
    password: str


class GoogleLogin(BaseModel):
    token: str


class UserCreate(BaseModel):
    """Admin / employee tạo tài khoản."""

    email: EmailStr
    password: Password
    full_name: Annotated[str, Field(min_length=1, max_length=255)]
    phone_number: Optional[PhoneNumber] = None
    role: UserRole = UserRole.CUSTOMER
    date_of_birth: Optional[datetime.date] = None
    picture: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[Password] = None
    full_name: Optional[str] = None
    phone_number: Optional[PhoneNumber] = None
    role: Optional[UserRole] = None
    date_of_birth: Optional[datetime.date] = None
    picture: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email: str
    full_name: str
    phone_number: Optional[str] = None
    role: str
    date_of_birth: Optional[datetime.date] = None
    picture: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
