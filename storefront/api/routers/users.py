from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import AddressIn, AddressOut, Envelope, UserCreate, UserRead
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=Envelope[UserRead], status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return Envelope(message="User created successfully", data=service.create_user(payload))


@router.get("/{user_id}", response_model=Envelope[UserRead])
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    service = UserService(db)
    return Envelope(message="User fetched", data=service.get_user(user_id))


@router.post("/{user_id}/addresses", response_model=Envelope[AddressOut], status_code=201)
def add_shipping_address(user_id: UUID, payload: AddressIn, db: Session = Depends(get_db)):
    service = UserService(db)
    return Envelope(message="Shipping address added", data=service.add_shipping_address(user_id, payload))
