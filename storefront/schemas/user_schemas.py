from pydantic import BaseModel, EmailStr, field_validator, model_validator


def _check_password(value: str) -> str:
    value = value.strip()
    if len(value) < 5 or not value.isalnum():
        raise ValueError(
            "Please enter a password with only numbers and text and at least 5 characters"
        )
    return value


class UserSignup(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value):
        return _check_password(value)

    @model_validator(mode="after")
    def validate_passwords(self):
        if self.password != self.confirm_password.strip():
            raise ValueError("Passwords have to match!")
        return self

class UserResponse(BaseModel):
    message: str
    user_id: int
    email: EmailStr

class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()

class Token(BaseModel):
    access_token: str
    token_type: str


class ResetRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()


class NewPasswordRequest(BaseModel):
    user_id: int
    token: str
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, value):
        return _check_password(value)
