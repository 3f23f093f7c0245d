# in-memory collections of sellers, customers and products

from __future__ import annotations

import math
from typing import List, Optional

from market.models import Customer, Product, Seller
from utils.logger import get_logger

_logger = get_logger(__name__)


def _next_id(ids) -> int:
    return max(ids, default=0) + 1


class RecordStore:
    """
    Owns the three primary collections and their id counters.

    Ids are assigned from independent counters per entity type. Lookups are
    linear scans returning the first match, and nothing is ever deleted.
    """

    def __init__(
        self,
        sellers: Optional[List[Seller]] = None,
        customers: Optional[List[Customer]] = None,
        products: Optional[List[Product]] = None,
    ) -> None:
        self.sellers: List[Seller] = list(sellers or [])
        self.customers: List[Customer] = list(customers or [])
        self.products: List[Product] = list(products or [])

        self.seller_counter = _next_id(s.id for s in self.sellers)
        self.customer_counter = _next_id(c.id for c in self.customers)
        self.product_counter = _next_id(p.id for p in self.products)

    # ---------------------------
    # Registration & Listing
    # ---------------------------

    def add_seller(self, name: str, email: str) -> int:
        sid = self.seller_counter
        self.seller_counter += 1
        self.sellers.append(Seller(id=sid, name=name, email=email))
        _logger.info(f"Registered seller {sid} ({email})")
        return sid

    def add_customer(self, name: str, address: str, phone: str, email: str) -> int:
        cid = self.customer_counter
        self.customer_counter += 1
        self.customers.append(
            Customer(id=cid, name=name, address=address, phone=phone, email=email)
        )
        _logger.info(f"Registered customer {cid} ({email})")
        return cid

    def add_product(
        self, name: str, price: float, category: str, quantity: int, seller_id: int
    ) -> int:
        """Append a new product listing and return its id."""
        if not math.isfinite(price) or price < 0:
            raise ValueError("Price must be a non-negative number.")
        if quantity < 0:
            raise ValueError("Quantity cannot be negative.")
        pid = self.product_counter
        self.product_counter += 1
        self.products.append(
            Product(
                id=pid,
                name=name,
                price=float(price),
                category=category,
                quantity=int(quantity),
                seller_id=seller_id,
            )
        )
        _logger.info(f"Seller {seller_id} listed product {pid} '{name}'")
        return pid

    # ---------------------------
    # Lookups
    # ---------------------------

    def find_seller_by_email(self, email: str) -> Optional[Seller]:
        return next((s for s in self.sellers if s.email == email), None)

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        return next((c for c in self.customers if c.email == email), None)

    def find_seller_by_id(self, sid: int) -> Optional[Seller]:
        return next((s for s in self.sellers if s.id == sid), None)

    def find_customer_by_id(self, cid: int) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == cid), None)

    def find_product_by_id(self, pid: int) -> Optional[Product]:
        return next((p for p in self.products if p.id == pid), None)

    def seller_email_available(self, email: str) -> bool:
        return self.find_seller_by_email(email) is None

    def customer_email_available(self, email: str) -> bool:
        return self.find_customer_by_email(email) is None

    # ---------------------------
    # Catalogue queries
    # ---------------------------

    def products_in_category(self, category: str) -> List[Product]:
        """Exact, case-sensitive category match in collection order."""
        return [p for p in self.products if p.category == category]

    def search_products(self, fragment: str) -> List[Product]:
        """Products whose name contains `fragment` (case-sensitive)."""
        return [p for p in self.products if fragment in p.name]

    def products_by_seller(self, seller_id: int) -> List[Product]:
        return [p for p in self.products if p.seller_id == seller_id]

    def categories(self) -> List[str]:
        """Distinct categories in order of first appearance."""
        return list(dict.fromkeys(p.category for p in self.products))
