"""
Signup/login. The core routes trust the ids they are given; these endpoints
exist so User records (and their roles) can be created and a token issued.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from nexus.config import get_db
from nexus.models.models import User
from nexus.schemas.auth_schemas import AuthResponse, LoginRequest, SignupRequest, UserResponse
from nexus.utils.auth import authenticate_user, create_user, get_current_user, get_user_by_email, issue_token
from nexus.utils.logger import configure_logging

auth_routes = APIRouter()
logger = configure_logging()


@auth_routes.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    if not req.email.strip() or not req.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")
    if get_user_by_email(req.email, db):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = create_user(
        db,
        email=req.email,
        password=req.password,
        role=req.role,
        display_name=req.display_name,
        institution=req.institution,
        primary_subject=req.primary_subject,
    )
    logger.info("user signed up id=%s role=%s", user.id, user.role)
    token = issue_token(response, user)
    return AuthResponse(message="Signup successful", token=token, user=UserResponse.model_validate(user))


@auth_routes.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    user = authenticate_user(req.email, req.password, db)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = issue_token(response, user)
    return AuthResponse(message="Login successful", token=token, user=UserResponse.model_validate(user))


@auth_routes.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
