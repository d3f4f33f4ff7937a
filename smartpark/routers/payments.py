# smartpark/routers/payments.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from smartpark.database import get_db
from smartpark.models.payment import Payment
from smartpark.models.user import User
from smartpark.routers.auth import get_current_user
from smartpark.schemas.payment import PaymentCreate, PaymentOut
from smartpark.services import parking_service
from smartpark.utils.pagination import paginate

router = APIRouter()


@router.post("/payments", response_model=PaymentOut, status_code=status.HTTP_201_CREATED,
             summary="Record a payment")
def create_payment(body: PaymentCreate, db: Session = Depends(get_db),
                   current_user: User = Depends(get_current_user)):
    return parking_service.record_payment(db, body.parking_record_id, body.amount_paid,
                                          body.payment_method, body.payment_date)


@router.get("/payments", summary="List payments")
def list_payments(page: int = 1, limit: int = 50, db: Session = Depends(get_db),
                  current_user: User = Depends(get_current_user)):
    q = db.query(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc())
    payments, total, total_pages = paginate(q, page, limit)
    return {"payments": [PaymentOut.model_validate(p) for p in payments],
            "total_pages": total_pages, "current_page": page, "total": total}
