from datetime import datetime, timedelta
from typing import Iterable, Optional

from jose import JWTError, jwt

from app.core.config import settings


def create_access_token(
    subject: str,
    roles: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=15))
    to_encode = {"sub": subject, "roles": list(roles), "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        return None
