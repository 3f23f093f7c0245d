from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from market.models import Customer, RejectedRecord, Seller
from market.persistence import FlatFileStore
from market.records import RecordStore
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class GlobalState:
    """
    Application state shared by screens.

    Fields:
      - persistence: flat-file store the records were loaded from
      - records: live sellers, customers and products
      - role: "customer" | "seller" | None when nobody is logged in
      - user_id: id of the logged-in customer or seller
      - rejected: records skipped by the last load
    """

    persistence: FlatFileStore = field(default_factory=FlatFileStore)
    records: RecordStore = field(default_factory=RecordStore)
    role: Optional[Literal["customer", "seller"]] = None
    user_id: Optional[int] = None
    rejected: List[RejectedRecord] = field(default_factory=list)

    def load(self) -> None:
        result = self.persistence.load()
        self.records = result.records
        self.rejected = result.rejected
        if self.rejected:
            _logger.warning(f"{len(self.rejected)} persisted records were skipped")

    def save(self) -> None:
        self.persistence.save(self.records)

    @property
    def customer(self) -> Optional[Customer]:
        if self.role != "customer" or self.user_id is None:
            return None
        return self.records.find_customer_by_id(self.user_id)

    @property
    def seller(self) -> Optional[Seller]:
        if self.role != "seller" or self.user_id is None:
            return None
        return self.records.find_seller_by_id(self.user_id)

    def login(self, role: Literal["customer", "seller"], email: str) -> bool:
        """Log in by email. Returns False if no account of that role matches."""
        if role == "customer":
            user = self.records.find_customer_by_email(email)
        else:
            user = self.records.find_seller_by_email(email)
        if user is None:
            return False
        self.role = role
        self.user_id = user.id
        return True

    def logout(self) -> None:
        self.role = None
        self.user_id = None
