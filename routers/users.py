from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from db.init import get_db
from models.user import User, UserCreate, ROLE_ADMIN
from models.login import LoginRequest
from utils.deps import get_current_account, get_optional_user
from utils.security import hash_password, verify_password, create_access_token
import logging

logger = logging.getLogger("uvicorn")

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db), payload=Depends(get_optional_user)):
    """
    Create a user account. The password is stored as a salted hash.
    Public callers always get a customer account; only an authenticated
    admin may register another admin.
    """
    if body.role == ROLE_ADMIN and (not payload or payload.get("role") != ROLE_ADMIN):
        raise HTTPException(status_code=403, detail="Only admins can create admin accounts")

    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username already exists") from e
    db.refresh(user)

    logger.info(f"Registered user {user.username!r} with role {user.role}")
    return {"message": "User registered successfully", **user.to_dict()}


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = User.by_username(db, body.username)

    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login for {body.username!r}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.username, "uid": user.id, "role": user.role})
    return {"access_token": token, "token_type": "bearer", "role": user.role}


@router.get("/me")
def me(user: User = Depends(get_current_account)):
    return user.to_dict()
