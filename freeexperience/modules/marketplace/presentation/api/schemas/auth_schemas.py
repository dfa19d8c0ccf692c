# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/auth_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The forms for creating an account and logging in.
#
# 🧪 Purpose (Technical Summary):
# Request schemas for the auth endpoints with email format validation.
#
# 🔗 Dependencies:
# pydantic (EmailStr via email-validator)
#
# 🔄 Connected Modules / Calls From:
# Auth router

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ....domain.models.actor import UserRole


class SignUpRequest(BaseModel):
    """New account registration"""
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, description="Password, at least 6 characters")
    role: UserRole = Field(UserRole.SPECIALIST, description="specialist or company")
    display_name: Optional[str] = Field(
        None,
        max_length=200,
        description="Full name for specialists, company name for companies"
    )


class SignInRequest(BaseModel):
    """Email and password sign-in"""
    email: EmailStr
    password: str = Field(..., min_length=1)
