from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlmodel import Session

from storefront.config import settings
from storefront.database import get_session
from storefront.models.user import User
from storefront.utils.timestamps import utcnow

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

TOKEN_TYPE = "access"


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "type": TOKEN_TYPE,
        "exp": utcnow() + expires_delta,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[int]:
    """User id carried by a valid, unexpired access token, else None."""
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    subject = claims.get("sub")
    if claims.get("type") != TOKEN_TYPE or not subject or not subject.isdigit():
        return None
    return int(subject)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> User:
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_error

    # token may outlive the account
    user = session.get(User, user_id)
    if user is None:
        raise credentials_error

    return user
