from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import asc
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from db.init import get_db
from models.service_category import ServiceCategory, CategoryCreate
from models.service_request import ServiceRequest
from models.user import ROLE_ADMIN
from utils.deps import role_required
import logging

logger = logging.getLogger("uvicorn")

router = APIRouter()


def _get_or_404(db: Session, id: int) -> ServiceCategory:
    c = db.query(ServiceCategory).filter(ServiceCategory.id == id).first()
    if not c:
        raise HTTPException(status_code=404, detail="Category not found")
    return c


def _commit_or_409(db: Session, detail: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=detail) from e


@router.get("")
def get_all(db: Session = Depends(get_db)):
    """
    Return every service category.
    Shape: [{ "id": 1, "name": "Electrician" }, ...]
    """
    rows = db.query(ServiceCategory).order_by(asc(ServiceCategory.name)).all()
    return [c.to_dict() for c in rows]


@router.get("/{id}")
def get_by_id(id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, id).to_dict()


@router.post(
    "",
    dependencies=[Depends(role_required(ROLE_ADMIN))],
    status_code=status.HTTP_201_CREATED,
)
def create(payload: CategoryCreate, db: Session = Depends(get_db)):
    c = ServiceCategory(name=payload.name)
    db.add(c)
    _commit_or_409(db, "Category name already exists")
    db.refresh(c)
    logger.info(f"Created service category {c.name!r}")
    return c.to_dict()


@router.put("/{id}", dependencies=[Depends(role_required(ROLE_ADMIN))])
def update(id: int, payload: CategoryCreate, db: Session = Depends(get_db)):
    c = _get_or_404(db, id)
    c.name = payload.name
    _commit_or_409(db, "Category name already exists")
    db.refresh(c)
    return c.to_dict()


@router.delete("/{id}", dependencies=[Depends(role_required(ROLE_ADMIN))])
def delete(id: int, db: Session = Depends(get_db)):
    c = _get_or_404(db, id)
    in_use = db.query(ServiceRequest).filter(ServiceRequest.category_id == id).count()
    if in_use:
        raise HTTPException(
            status_code=409,
            detail=f"Category is referenced by {in_use} booking(s)",
        )
    db.delete(c)
    _commit_or_409(db, "Category is still referenced")
    logger.info(f"Deleted service category {id}")
    return {"deleted": True}
