"""Request, line item and response types."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ValidationError
from .formatting import to_decimal

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)
_TOTALS_TOLERANCE = Decimal("0.01")


class InvoiceType(Enum):
    ISSUANCE = "REC Issuance"
    REDEMPTION = "REC Redemption"
    WITHDRAWAL = "REC Withdrawal"

    @property
    def slug(self) -> str:
        return self.value.replace(" ", "-")

    @classmethod
    def parse(cls, raw: Any) -> "InvoiceType":
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            key = " ".join(raw.split()).lower()
            for member in cls:
                if key in (member.value.lower(), member.value.split(" ", 1)[1].lower()):
                    return member
        allowed = ", ".join(member.value for member in cls)
        raise ValidationError(f"Unsupported invoice type {raw!r}; expected one of: {allowed}.")


def _require_str(payload: Mapping[str, Any], *keys: str, prefix: str = "") -> str:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    raise ValidationError(f"'{prefix}{keys[0]}' is required.")


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _amount(payload: Mapping[str, Any], key: str, prefix: str = "", default: Any = None) -> Decimal:
    name = f"{prefix}{key}"
    raw = payload.get(key, default)
    if raw is None:
        raise ValidationError(f"'{name}' is required.")
    value = to_decimal(raw, name)
    if value < 0:
        raise ValidationError(f"'{name}' must not be negative.")
    return value


@dataclass(frozen=True)
class LineItem:
    device_name: str
    quantity: Decimal
    issuer: str
    start_date: str
    end_date: str
    unit_price: Decimal
    total_excl_tax: Decimal
    tax: Decimal = Decimal(0)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], prefix: str = "") -> "LineItem":
        if not isinstance(payload, Mapping):
            raise ValidationError(f"'{prefix.rstrip('.') or 'details'}' must be an object.")
        return cls(
            device_name=_require_str(payload, "deviceName", prefix=prefix),
            quantity=_amount(payload, "quantity", prefix),
            issuer=_require_str(payload, "issuer", prefix=prefix),
            start_date=_require_str(payload, "startDate", prefix=prefix),
            end_date=_require_str(payload, "endDate", prefix=prefix),
            unit_price=_amount(payload, "unitPrice", prefix),
            total_excl_tax=_amount(payload, "totalExclTax", prefix),
            tax=_amount(payload, "tax", prefix, default=0),
        )


@dataclass(frozen=True)
class InvoiceRequest:
    tx_id: str
    invoice_type: InvoiceType
    company_name: str
    currency_code: str
    total_excl_tax: Decimal
    tax: Decimal
    grand_total: Decimal
    items: Tuple[LineItem, ...]
    discount_pct: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    address: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.invoice_type, InvoiceType):
            object.__setattr__(self, "invoice_type", InvoiceType.parse(self.invoice_type))
        if not self.items:
            raise ValidationError("An invoice needs at least one line item.")
        if not Decimal(0) <= self.discount_pct <= _HUNDRED:
            raise ValidationError("'discountPct' must be between 0 and 100.")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "InvoiceRequest":
        if not isinstance(payload, Mapping):
            raise ValidationError("Invoice payload must be an object.")

        invoice_type = InvoiceType.parse(payload.get("type", payload.get("invoiceType")))

        details = payload.get("details")
        if details is None:
            items: Tuple[LineItem, ...] = (LineItem.from_payload(payload),)
        elif isinstance(details, list):
            items = tuple(
                LineItem.from_payload(entry, prefix=f"details[{index}].")
                for index, entry in enumerate(details)
            )
        else:
            raise ValidationError("'details' must be an array.")

        request = cls(
            tx_id=_require_str(payload, "txId", "issuanceTxId"),
            invoice_type=invoice_type,
            company_name=_require_str(payload, "companyName"),
            address=_optional_str(payload, "address"),
            currency_code=_require_str(payload, "currencyCode").upper(),
            total_excl_tax=_amount(payload, "totalExclTax"),
            tax=_amount(payload, "tax", default=0),
            discount_pct=_amount(payload, "discountPct", default=0),
            discount=_amount(payload, "discount", default=0),
            grand_total=_amount(payload, "grandTotal"),
            items=items,
        )
        request.check_totals()
        return request

    def expected_grand_total(self) -> Decimal:
        return sum((item.total_excl_tax for item in self.items), Decimal(0)) + self.tax - self.discount

    def check_totals(self) -> bool:
        """Log, but accept, a grand total that disagrees with its parts."""
        expected = self.expected_grand_total()
        if abs(expected - self.grand_total) > _TOTALS_TOLERANCE:
            logger.warning(
                "Grand total %s for %s does not match line totals plus tax minus discount (%s)",
                self.grand_total,
                self.tx_id,
                expected,
            )
            return False
        return True


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    filename: str
    page_count: int = 1


@dataclass
class InvoiceResponse:
    data: Optional[str] = None
    url: Optional[str] = None
    err: Optional[str] = None

    @classmethod
    def success(cls, content: bytes, url: str) -> "InvoiceResponse":
        return cls(data=base64.b64encode(content).decode("ascii"), url=url)

    @classmethod
    def failure(cls, message: str) -> "InvoiceResponse":
        return cls(err=message)

    @property
    def ok(self) -> bool:
        return self.err is None

    def to_dict(self) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for key in ("data", "url", "err"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result
