# smartpark/routers/cars.py
"""Search, look up and edit cars. Cars are created by parking entries, never directly."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from smartpark.database import get_db
from smartpark.errors import NotFoundError
from smartpark.models.car import Car
from smartpark.models.user import User
from smartpark.routers.auth import get_current_user
from smartpark.schemas.car import CarOut, CarUpdate
from smartpark.services.parking_service import lookup_car_by_plate
from smartpark.utils.pagination import paginate

router = APIRouter()


@router.get("/cars", summary="List cars")
def list_cars(
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Active cars, newest first. `search` matches plate, driver or phone (case-insensitive)."""
    q = db.query(Car).filter(Car.is_active == True)  # noqa: E712
    if search:
        pattern = f"%{search}%"
        q = q.filter(or_(Car.plate_number.ilike(pattern),
                         Car.driver_name.ilike(pattern),
                         Car.phone_number.ilike(pattern)))
    cars, total, total_pages = paginate(q.order_by(Car.created_at.desc(), Car.id.desc()), page, limit)
    return {"cars": [CarOut.model_validate(c) for c in cars],
            "total_pages": total_pages, "current_page": page, "total": total}


@router.get("/cars/plate/{plate_number}", response_model=CarOut, summary="Look up a car by plate")
def get_car_by_plate(plate_number: str, db: Session = Depends(get_db),
                     current_user: User = Depends(get_current_user)):
    car = lookup_car_by_plate(db, plate_number)
    if not car:
        raise NotFoundError("Car not found")
    return car


@router.get("/cars/{car_id}", response_model=CarOut, summary="Get a car")
def get_car(car_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    car = db.query(Car).filter(Car.id == car_id).first()
    if not car or not car.is_active:
        raise NotFoundError("Car not found")
    return car


@router.put("/cars/{car_id}", response_model=CarOut, summary="Update car details")
def update_car(car_id: int, body: CarUpdate, db: Session = Depends(get_db),
               current_user: User = Depends(get_current_user)):
    car = db.query(Car).filter(Car.id == car_id).first()
    if not car or not car.is_active:
        raise NotFoundError("Car not found")
    for field, value in body.model_dump(exclude_none=True).items():
        if value:
            setattr(car, field, value)
    db.commit()
    db.refresh(car)
    return car
