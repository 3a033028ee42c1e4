"""
Checkout intent - the in-flight purchase handed to the payment gateway.

The intent is never stored locally. It travels as gateway metadata and is
decoded from the gateway's echo at settlement time, so the gateway is the
single durable copy between checkout and settlement.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from ..value_objects import Money, validate_fee_rate
from .order import DeliveryDetails, OrderItem

METADATA_VERSION = 1


@dataclass(frozen=True)
class CheckoutLine:
    """A revalidated line: live price and name captured at checkout."""
    product_id: int
    product_name: str
    product_price: Money
    quantity: int

    @property
    def subtotal(self) -> Money:
        return self.product_price * self.quantity

    def to_order_item(self) -> OrderItem:
        return OrderItem.create(
            product_id=self.product_id,
            product_name=self.product_name,
            product_price=self.product_price,
            quantity=self.quantity,
        )


@dataclass(frozen=True)
class ShopGroup:
    """The part of a checkout belonging to one seller."""
    seller_id: int
    shop_name: str
    lines: List[CheckoutLine] = field(default_factory=list)

    @property
    def order_total(self) -> Money:
        currency = self.lines[0].product_price.currency if self.lines else "NGN"
        total = Money.zero(currency)
        for line in self.lines:
            total = total + line.subtotal
        return total


@dataclass(frozen=True)
class CheckoutIntent:
    """
    Everything settlement needs to materialize orders.

    ``fee_rate`` is frozen here at checkout time and honoured at settlement,
    even if the configured rate has changed in between.
    """
    buyer_id: int
    payment_reference: str
    groups: List[ShopGroup]
    delivery: DeliveryDetails
    fee_rate: Decimal
    currency: str = "NGN"

    @property
    def total_amount(self) -> Money:
        total = Money.zero(self.currency)
        for group in self.groups:
            total = total + group.order_total
        return total

    @property
    def platform_fee(self) -> Money:
        return self.total_amount.percentage(self.fee_rate)

    # =========================================================================
    # GATEWAY METADATA CODEC
    # =========================================================================

    def to_metadata(self) -> Dict[str, Any]:
        """Serialize to JSON-safe gateway metadata (decimals as strings)."""
        return {
            "version": METADATA_VERSION,
            "buyer_id": self.buyer_id,
            "payment_reference": self.payment_reference,
            "currency": self.currency,
            "fee_rate": str(self.fee_rate),
            "total_amount": str(self.total_amount.amount),
            "platform_fee": str(self.platform_fee.amount),
            "delivery": {
                "name": self.delivery.name,
                "phone": self.delivery.phone,
                "address": self.delivery.address,
                "notes": self.delivery.notes,
            },
            "orders": [
                {
                    "seller_id": group.seller_id,
                    "shop_name": group.shop_name,
                    "order_total": str(group.order_total.amount),
                    "items": [
                        {
                            "product_id": line.product_id,
                            "product_name": line.product_name,
                            "product_price": str(line.product_price.amount),
                            "quantity": line.quantity,
                            "subtotal": str(line.subtotal.amount),
                        }
                        for line in group.lines
                    ],
                }
                for group in self.groups
            ],
        }

    @classmethod
    def from_metadata(cls, metadata: Dict[str, Any]) -> 'CheckoutIntent':
        """
        Decode gateway metadata back into an intent.

        Line subtotals and shop totals are recomputed and must match the
        echoed figures.

        Raises:
            ValueError: If the metadata is missing fields or inconsistent
        """
        try:
            currency = metadata.get("currency", "NGN")
            delivery_data = metadata["delivery"]
            groups = []
            for group_data in metadata["orders"]:
                lines = [
                    CheckoutLine(
                        product_id=int(item["product_id"]),
                        product_name=str(item["product_name"]),
                        product_price=Money(Decimal(str(item["product_price"])), currency),
                        quantity=int(item["quantity"]),
                    )
                    for item in group_data["items"]
                ]
                group = ShopGroup(
                    seller_id=int(group_data["seller_id"]),
                    shop_name=str(group_data.get("shop_name", "")),
                    lines=lines,
                )
                if not lines:
                    raise ValueError(f"Shop group {group.seller_id} has no items")
                for line, item in zip(lines, group_data["items"]):
                    if "subtotal" in item and line.subtotal != Money(Decimal(str(item["subtotal"])), currency):
                        raise ValueError(f"Subtotal mismatch for product {line.product_id}")
                if group.order_total != Money(Decimal(str(group_data["order_total"])), currency):
                    raise ValueError(f"Order total mismatch for seller {group.seller_id}")
                groups.append(group)

            intent = cls(
                buyer_id=int(metadata["buyer_id"]),
                payment_reference=str(metadata["payment_reference"]),
                groups=groups,
                delivery=DeliveryDetails(
                    name=delivery_data["name"],
                    phone=delivery_data["phone"],
                    address=delivery_data["address"],
                    notes=delivery_data.get("notes"),
                ),
                fee_rate=validate_fee_rate(Decimal(str(metadata["fee_rate"]))),
                currency=currency,
            )
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise ValueError(f"Malformed checkout metadata: {e!r}")

        if not intent.groups:
            raise ValueError("Checkout metadata contains no orders")
        if "total_amount" in metadata and intent.total_amount != Money(
            Decimal(str(metadata["total_amount"])), currency
        ):
            raise ValueError("Checkout total does not match its shop groups")
        return intent
