"""Service container shared by the routes of one app instance."""

from typing import Optional

from marketplace.db.connection import Database
from marketplace.kafka.producer import KafkaProducer
from marketplace.services.attribute import AttributeService
from marketplace.services.brand import BrandService
from marketplace.services.category import CategoryService
from marketplace.services.coupon import CouponService
from marketplace.services.dashboard import DashboardService
from marketplace.services.product import ProductService
from marketplace.services.review import ReviewService
from marketplace.services.shop import ShopService
from marketplace.services.staff import StaffService
from marketplace.services.tag import TagService
from marketplace.services.user import UserService


class Services:
    def __init__(self, database: Optional[Database] = None, kafka: Optional[KafkaProducer] = None):
        self.categories = CategoryService(database, kafka)
        self.brands = BrandService(database, kafka)
        self.tags = TagService(database, kafka)
        self.attributes = AttributeService(database, kafka)
        self.products = ProductService(database, kafka)
        self.coupons = CouponService(database, kafka)
        self.reviews = ReviewService(database, kafka)
        self.staff = StaffService(database, kafka)
        self.users = UserService(database, kafka)
        self.shops = ShopService(database, kafka)
        self.dashboard = DashboardService(database, kafka)
