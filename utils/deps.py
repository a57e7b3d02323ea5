from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from db.init import get_db
from models.user import User
from utils.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):

    if credentials is None or not credentials.scheme.lower() == "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = credentials.credentials
    payload = decode_token(token)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload


def get_optional_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    """
    Claims of a valid bearer token, or None. A missing, expired or
    undecodable token makes the caller anonymous instead of a 401.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return decode_token(credentials.credentials)


def get_current_account(payload=Depends(get_current_user), db: Session = Depends(get_db)) -> User:
    """
    Resolve the token to its User row. The token id claim is tried first,
    the username (sub) is the fallback.
    """
    user = None
    user_id = payload.get("uid")
    if user_id is not None:
        user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None and payload.get("sub"):
        user = User.by_username(db, payload["sub"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def role_required(role: str):
    def wrapper(payload=Depends(get_current_user)):
        if payload.get("role") != role:
            raise HTTPException(status_code=403, detail="Not enough privileges")
        return payload
    return wrapper
