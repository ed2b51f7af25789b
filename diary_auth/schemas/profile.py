"""Profile schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator


class ProfileUpdate(BaseModel):
    """Partial profile update. Blank fields leave the stored value untouched."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = Field(None, max_length=255)

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
