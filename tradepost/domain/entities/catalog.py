"""Read-only snapshots of catalog collaborator records (buyers, shops, products)."""
from dataclasses import dataclass
from typing import Optional

from ..value_objects import Money


@dataclass(frozen=True)
class Buyer:
    user_id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


@dataclass(frozen=True)
class Shop:
    seller_id: int
    user_id: int
    shop_name: str
    shop_slug: str
    payment_subaccount_code: Optional[str] = None


@dataclass(frozen=True)
class Product:
    product_id: int
    seller_id: int
    name: str
    price: Money
    quantity_available: int
