from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from models.user import UserGender, UserRole


# ---------- registration ----------
class UserCreate(BaseModel):
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=100)
    age: int = Field(..., ge=1, le=150)
    gender: Optional[UserGender] = UserGender.OTHER
    email: EmailStr
    password: str

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "firstName": "Jane",
                "lastName": "Doe",
                "age": 30,
                "email": "jane@example.com",
                "password": "StrongPass123!"
            }
        }


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: "UserRead"


class ProfileDetails(BaseModel):
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    address: Optional[str] = None
    preferred_causes: List[str] = Field(default_factory=list, alias="preferredCauses")

    class Config:
        populate_by_name = True


class UserRead(BaseModel):
    id: int
    email: EmailStr
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    age: int
    gender: Optional[UserGender]
    role: UserRole
    verified: bool
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True


# ---------- profile edit ----------
class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, alias="firstName", min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=1, le=150)
    gender: Optional[UserGender] = None
    profile: Optional[ProfileDetails] = None

    class Config:
        populate_by_name = True


class RoleUpdate(BaseModel):
    role: UserRole


TokenResponse.model_rebuild()
