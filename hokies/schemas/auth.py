from pydantic import BaseModel, constr


class LoginRequest(BaseModel):
    password: constr(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: constr(min_length=1)
