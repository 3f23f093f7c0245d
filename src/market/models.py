# provide dataclass models

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from market.ledger import CartLedger


@dataclass(frozen=True)
class Seller:
    id: int
    name: str
    email: str


@dataclass
class Customer:
    id: int
    name: str
    address: str
    phone: str
    email: str
    cart: CartLedger = field(default_factory=CartLedger, repr=False)


@dataclass
class Product:
    id: int
    name: str
    price: float
    category: str
    quantity: int  # live stock level
    seller_id: int
    rating_sum: float = 0.0
    rating_count: int = 0

    @property
    def average_rating(self) -> float:
        if self.rating_count == 0:
            return 0.0
        return self.rating_sum / self.rating_count

    def add_rating(self, rating: float) -> None:
        self.rating_sum += rating
        self.rating_count += 1

    def snapshot(self) -> Product:
        """Independent copy, unaffected by later changes to this record."""
        return dataclasses.replace(self)


@dataclass(frozen=True)
class CartItem:
    product: Product  # snapshot taken when the item was staged
    buy_qty: int

    @property
    def line_total(self) -> float:
        return self.product.price * self.buy_qty


@dataclass(frozen=True)
class ReceiptLine:
    product_id: int
    product_name: str
    qty: int
    unit_price: float  # price at the time the item was staged
    line_total: float
    rating: int


@dataclass(frozen=True)
class LineFailure:
    product_id: int
    product_name: str
    qty: int
    reason: str


@dataclass(frozen=True)
class Receipt:
    timestamp: datetime
    lines: List[ReceiptLine]
    total: float
    failures: List[LineFailure]


@dataclass(frozen=True)
class RejectedRecord:
    source: str  # file name
    line_no: int
    line: str
    reason: str
