from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.order_event import OrderEvent

# add ALL models here
