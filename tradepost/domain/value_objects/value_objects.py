"""Domain value objects - pure Python immutable types."""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID, uuid4

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency, in major units.

    Amounts are always quantized to two decimal places so that
    ``platform_fee + seller_amount == total`` holds exactly.

    CRITICAL: Always use Decimal, never float!
    """
    amount: Decimal
    currency: str = "NGN"

    def __post_init__(self):
        # Convert to Decimal if needed
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        object.__setattr__(
            self, 'amount', self.amount.quantize(CENT, rounding=ROUND_HALF_UP)
        )

        # Validate currency code (3 letters)
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    @classmethod
    def zero(cls, currency: str = "NGN") -> 'Money':
        return cls(amount=Decimal("0"), currency=currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def _check_currency(self, other: 'Money', verb: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {verb} different currencies: {self.currency} vs {other.currency}"
            )

    def __add__(self, other: 'Money') -> 'Money':
        """Add two Money objects (must have same currency)."""
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two Money objects (must have same currency)."""
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __mul__(self, quantity: int) -> 'Money':
        """Multiply by a whole quantity (unit price x units)."""
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise TypeError(f"Money can only be multiplied by int, got {type(quantity).__name__}")
        return Money(amount=self.amount * quantity, currency=self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def percentage(self, rate: Decimal) -> 'Money':
        """Return ``amount * rate`` rounded half-up to the cent."""
        return Money(amount=self.amount * Decimal(str(rate)), currency=self.currency)

    def to_minor_units(self) -> int:
        """Amount in the smallest currency unit (kobo, cents)."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))

    @classmethod
    def from_minor_units(cls, value: int, currency: str = "NGN") -> 'Money':
        return cls(amount=Decimal(int(value)) / 100, currency=currency)

    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > 0

    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == 0


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for request tracing across a unit of work."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


_REFERENCE_PATTERN = re.compile(r"^[A-Z]{2,8}-\d{13}-\d+-[0-9a-f]{16}$")


@dataclass(frozen=True)
class PaymentReference:
    """
    Idempotency key for a whole checkout.

    Format: ``<PREFIX>-<epoch millis>-<buyer id>-<16 hex chars>``.
    The random suffix makes references unguessable; the time and buyer
    parts keep them readable in gateway dashboards.
    """
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Payment reference cannot be empty")

    @classmethod
    def generate(
        cls,
        buyer_id: int,
        prefix: str = "TP",
        now: Optional[datetime] = None,
    ) -> "PaymentReference":
        moment = now or datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        millis = int(moment.timestamp() * 1000)
        return cls(f"{prefix.upper()}-{millis:013d}-{buyer_id}-{secrets.token_hex(8)}")

    def is_well_formed(self) -> bool:
        """True for references minted by :meth:`generate`."""
        return bool(_REFERENCE_PATTERN.match(self.value))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SellerIdentity:
    """An authenticated user acting as the owner of a shop."""

    user_id: int
    seller_id: int
