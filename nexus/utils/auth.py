from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, Response, status
from sqlalchemy.orm import Session

from nexus.config import get_db, settings
from nexus.models.models import User
from nexus.utils.jwt import create_access_token, get_password_hash, verify_password, verify_token

COOKIE_NAME = "access_token"


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_current_user(
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from `Authorization: Bearer <jwt>` or the access_token cookie."""
    token = _bearer(authorization) or access_token
    payload = verify_token(token)
    user = db.get(User, payload.sub)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def issue_token(response: Response, user: User) -> str:
    token = create_access_token(user.id, role=user.role)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return token


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    role: str,
    display_name: Optional[str] = None,
    institution: Optional[str] = None,
    primary_subject: Optional[str] = None,
) -> User:
    user = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
        display_name=display_name,
        institution=institution,
        primary_subject=primary_subject,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(email: str, password: str, db: Session) -> Optional[User]:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
