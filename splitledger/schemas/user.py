from pydantic import BaseModel, EmailStr

class UserCreate(BaseModel):
    name: str
    email: EmailStr
    avatar_ref: str | None = None

class UserUpdate(BaseModel):
    name: str
    avatar_ref: str | None = None

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    avatar_ref: str | None = None

    class Config:
        from_attributes = True
