#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.cart import CartModel
from storefront.data.models.order import OrderModel

__all__ = ["UserModel", "CartModel", "OrderModel"]
