from typing import Dict

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.shared.utils.security import decode_token

ADMIN = "ADMIN"
MODERATOR = "MODERATOR"

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    creds: HTTPAuthorizationCredentials = Security(bearer_scheme),
) -> Dict:
    if not creds or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid auth header")

    payload = decode_token(creds.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return {"id": str(payload["sub"]), "roles": {str(r).upper() for r in roles}}


async def require_moderator(user: Dict = Depends(get_current_user)) -> Dict:
    """Moderation queue and report triage are open to moderators and admins only."""
    if not user["roles"] & {MODERATOR, ADMIN}:
        raise HTTPException(status_code=403, detail="Moderator role required")
    return user


def is_admin(user: Dict) -> bool:
    return ADMIN in user["roles"]
