"""Seed data and request builders shared by the test suite."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from tradepost.application.dtos.checkout_dto import (
    CheckoutItemRequest,
    CheckoutRequest,
    DeliveryDetailsDTO,
    ShopOrderRequest,
)
from tradepost.data.models import CartItemModel, CartModel, ProductModel, SellerModel, UserModel

# Seeded identities
BUYER_ID = 1
OTHER_BUYER_ID = 2
SELLER_A_USER_ID = 10
SELLER_B_USER_ID = 11
SHOP_A = 1
SHOP_B = 2

# Seeded products
LAMP = 101        # shop A, 2500.00, 10 in stock
MUG = 102         # shop A, 1500.00, 5 in stock
RUG = 201         # shop B, 4000.00, 3 in stock
RETIRED = 202     # shop B, soft-deleted


def seed_catalog(session: Session) -> None:
    session.add_all([
        UserModel(id=BUYER_ID, email="ada@example.com", first_name="Ada", last_name="Obi", phone="0801"),
        UserModel(id=OTHER_BUYER_ID, email="tunde@example.com", first_name="Tunde", last_name="Bello"),
        UserModel(id=SELLER_A_USER_ID, email="crafts@example.com", first_name="Kemi", last_name="Ade"),
        UserModel(id=SELLER_B_USER_ID, email="weaves@example.com", first_name="Femi", last_name="Ola"),
    ])
    session.add_all([
        SellerModel(id=SHOP_A, user_id=SELLER_A_USER_ID, shop_name="Kemi Crafts", shop_slug="kemi-crafts"),
        SellerModel(id=SHOP_B, user_id=SELLER_B_USER_ID, shop_name="Femi Weaves", shop_slug="femi-weaves"),
    ])
    session.add_all([
        ProductModel(id=LAMP, seller_id=SHOP_A, name="Brass Lamp", price=Decimal("2500.00"), quantity_available=10),
        ProductModel(id=MUG, seller_id=SHOP_A, name="Clay Mug", price=Decimal("1500.00"), quantity_available=5),
        ProductModel(id=RUG, seller_id=SHOP_B, name="Aso Oke Rug", price=Decimal("4000.00"), quantity_available=3),
        ProductModel(
            id=RETIRED,
            seller_id=SHOP_B,
            name="Old Basket",
            price=Decimal("5000.00"),
            quantity_available=9,
            deleted_at=datetime(2026, 1, 1),
        ),
    ])
    cart = CartModel(id=1, user_id=BUYER_ID)
    cart.items = [
        CartItemModel(product_id=LAMP, quantity=2),
        CartItemModel(product_id=RUG, quantity=1),
    ]
    session.add(cart)
    session.add(CartModel(id=2, user_id=OTHER_BUYER_ID, items=[CartItemModel(product_id=MUG, quantity=1)]))


def make_request(*groups, delivery=None) -> CheckoutRequest:
    """Build a checkout request from ``(seller_id, [(product_id, quantity), ...])`` pairs."""
    return CheckoutRequest(
        orders=[
            ShopOrderRequest(
                seller_id=seller_id,
                items=[CheckoutItemRequest(product_id=p, quantity=q) for p, q in items],
            )
            for seller_id, items in groups
        ],
        delivery_details=delivery
        or DeliveryDetailsDTO(name="Ada Obi", phone="08010000000", address="12 Marina, Lagos"),
    )
