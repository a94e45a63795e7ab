from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.data.models.shipping_address import ShippingAddressModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: UUID) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        return user

    def get_address(self, address_id: UUID) -> ShippingAddressModel | None:
        return self.db.get(ShippingAddressModel, address_id)

    def add_address(self, address: ShippingAddressModel) -> ShippingAddressModel:
        self.db.add(address)
        self.db.commit()
        return address
