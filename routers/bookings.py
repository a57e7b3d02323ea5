from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from db.init import get_db
from models.service_category import ServiceCategory
from models.service_request import ServiceRequest, BookingCreate
from models.user import User, ROLE_ADMIN
from utils.deps import get_current_account
import logging

logger = logging.getLogger("uvicorn")

router = APIRouter()


@router.post("/bookService", status_code=status.HTTP_201_CREATED)
def book_service(
    body: BookingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_account),
):
    """
    Create a service request for the authenticated user.
    Body: { "description": "Leaky faucet", "categoryId": 2 }
    """
    category = db.query(ServiceCategory).filter(ServiceCategory.id == body.category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    req = ServiceRequest(
        description=body.description,
        category_id=category.id,
        user_id=user.id,
        completed=False,
    )
    db.add(req)
    try:
        db.commit()
    except IntegrityError as e:
        # category deleted between the lookup and the insert
        db.rollback()
        raise HTTPException(status_code=409, detail="Booking references a missing record") from e
    db.refresh(req)

    logger.info(f"User {user.username!r} booked {category.name!r} (request {req.id})")
    return {"message": "Service booked successfully", **req.to_dict()}


@router.get("/bookings")
def list_bookings(db: Session = Depends(get_db), user: User = Depends(get_current_account)):
    q = db.query(ServiceRequest)
    if user.role != ROLE_ADMIN:
        q = q.filter(ServiceRequest.user_id == user.id)
    return [r.to_dict() for r in q.order_by(ServiceRequest.requested_at.desc()).all()]


@router.patch("/bookings/{booking_id}/complete")
def complete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_account),
):
    req = db.query(ServiceRequest).filter(ServiceRequest.id == booking_id).first()
    if not req:
        raise HTTPException(status_code=404, detail="Booking not found")
    if user.role != ROLE_ADMIN and req.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not enough privileges")

    req.completed = True
    db.commit()
    db.refresh(req)
    return req.to_dict()
