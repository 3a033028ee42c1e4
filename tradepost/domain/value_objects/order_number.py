"""Order number value object."""
import re
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..clock import utcnow

_ORDER_NUMBER_PATTERN = re.compile(r"^ORD-(\d{8})-(\d+)-([0-9A-F]{6})$")


@dataclass(frozen=True)
class OrderNumber:
    """
    Human-facing, shop-scoped order identifier.

    Format: ORD-<YYYYMMDD>-<seller id>-<6 hex chars>
    Examples:
    - ORD-20260114-12-9F03AB
    - ORD-20261001-3-00C1D2
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order number cannot be empty")

        if not _ORDER_NUMBER_PATTERN.match(self.value):
            raise ValueError(
                f"Invalid order number format (expected ORD-YYYYMMDD-<seller>-XXXXXX): {self.value}"
            )

    @classmethod
    def generate(cls, seller_id: int, now: Optional[datetime] = None) -> "OrderNumber":
        """Mint a fresh order number for ``seller_id``."""
        moment = now or utcnow()
        suffix = secrets.token_hex(3).upper()
        return cls(f"ORD-{moment:%Y%m%d}-{seller_id}-{suffix}")

    @property
    def seller_id(self) -> int:
        return int(_ORDER_NUMBER_PATTERN.match(self.value).group(2))

    def __str__(self) -> str:
        return self.value
