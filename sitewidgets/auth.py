import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt

from sitewidgets.config import settings
from sitewidgets.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

ADMIN_ROLES = ("admin", "superadmin")

# Bearer token scheme; the cookie fallback happens in require_admin
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})

    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (email or username) in token data.")

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        logger.warning("Token expired")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {str(e)}")
        raise AuthenticationError("Invalid token")

    if payload.get("sub") is None:
        logger.warning("Token is missing 'sub' claim")
        raise AuthenticationError("Token does not contain 'sub' field.")
    return payload


async def require_admin(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """
    Dependency guarding admin routes.

    Accepts the token as a bearer header or in the ``access_token`` cookie
    and returns the decoded claims.
    """
    token = token or request.cookies.get("access_token")
    if not token:
        raise AuthenticationError("Could not validate credentials")

    claims = decode_access_token(token)
    if claims.get("role") not in ADMIN_ROLES:
        logger.warning(f"User {claims.get('sub')} lacks an admin role")
        raise AuthorizationError(required_role="admin")

    request.state.user = claims
    return claims
