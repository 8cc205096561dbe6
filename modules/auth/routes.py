"""
Auth Module - Routes
=====================
JSON login: returns a bearer token and sets the auth_token cookie.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from common.security import get_cookie_kwargs
from modules.auth.service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


@router.post("/login")
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    user, token = auth_service.login(db, body.email, body.password)
    response = JSONResponse({"token": token, "user": user.to_dict()})
    response.set_cookie("auth_token", token, **get_cookie_kwargs())
    return response
