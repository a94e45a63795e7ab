# storefront/services/user_service.py
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.data.models.shipping_address import ShippingAddressModel
from storefront.domain.errors import NotFound
from storefront.domain.schemas import AddressIn, AddressOut, UserCreate, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """Identity stub: just enough rows for orders and invoices to join against."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, data: UserCreate) -> UserRead:
        user = self.repo.create_user(UserModel(name=data.name, email=data.email, phone=data.phone))
        logger.info(f"User {user.id} created")
        return UserRead.model_validate(user)

    def get_user(self, user_id: UUID) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return UserRead.model_validate(user)

    def add_shipping_address(self, user_id: UUID, data: AddressIn) -> AddressOut:
        if not self.repo.get_user(user_id):
            raise NotFound("User not found")

        address = self.repo.add_address(ShippingAddressModel(user_id=user_id, **data.model_dump()))
        logger.info(f"Address {address.id} added for user {user_id}")
        return AddressOut.model_validate(address)
