# flat-file storage: one pipe-delimited record per line, four files
#
#   sellers.txt    id|name|email
#   customers.txt  id|name|address|phone|email
#   products.txt   id|name|price|category|quantity|sellerId|ratingSum|ratingCount
#   carts.txt      customerId|productId|buyQty
from __future__ import annotations

import math
import os
import tempfile
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from market.errors import LoadError
from market.models import CartItem, Customer, Product, RejectedRecord, Seller
from market.records import RecordStore
from utils.logger import get_logger

_logger = get_logger(__name__)

DATA_DIR = os.getenv("MARKETPLACE_DATA_DIR", "data")

SELLERS_FILE = "sellers.txt"
CUSTOMERS_FILE = "customers.txt"
PRODUCTS_FILE = "products.txt"
CARTS_FILE = "carts.txt"

DELIMITER = "|"

SELLER_FIELDS = 3
CUSTOMER_FIELDS = 5
PRODUCT_FIELDS = 8
CART_FIELDS = 3

MALFORMED = "malformed"
UNKNOWN_CUSTOMER = "unknown customer"
UNKNOWN_PRODUCT = "unknown product"


@dataclass
class LoadResult:
    records: RecordStore
    rejected: List[RejectedRecord] = field(default_factory=list)


def _fmt(value) -> str:
    # repr of a float is the shortest string that parses back to it
    return repr(value) if isinstance(value, float) else str(value)


def _join(*values) -> str:
    return DELIMITER.join(_fmt(v) for v in values)


class _LineParser:
    """Number parsing with the file and line attached to any failure."""

    def __init__(self, source: str, line_no: int, line: str) -> None:
        self.source = source
        self.line_no = line_no
        self.line = line

    def _fail(self, reason: str) -> LoadError:
        return LoadError(self.source, self.line_no, self.line, reason)

    def integer(self, raw: str, what: str, minimum: int | None = None) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise self._fail(f"{what} {raw!r} is not an integer") from None
        if minimum is not None and value < minimum:
            raise self._fail(f"{what} {value} is below {minimum}")
        return value

    def number(self, raw: str, what: str) -> float:
        try:
            value = float(raw)
        except ValueError:
            raise self._fail(f"{what} {raw!r} is not a number") from None
        if not math.isfinite(value) or value < 0:
            raise self._fail(f"{what} {raw!r} must be a non-negative number")
        return value


class FlatFileStore:
    """
    Saves and reloads the whole marketplace as four independent files.

    Every save rewrites all four files. Each file is staged next to its
    target and swapped in with os.replace only after all four were written,
    so a crash leaves each file either old or new, though the set of files
    may still mix old and new versions.
    """

    def __init__(self, data_dir: str | None = None) -> None:
        self.data_dir = data_dir or DATA_DIR

    def path(self, name: str) -> str:
        return os.path.join(self.data_dir, name)

    # ---------------------------
    # Save
    # ---------------------------

    def save(self, records: RecordStore) -> None:
        os.makedirs(self.data_dir, exist_ok=True)
        contents = {
            SELLERS_FILE: [_join(s.id, s.name, s.email) for s in records.sellers],
            CUSTOMERS_FILE: [
                _join(c.id, c.name, c.address, c.phone, c.email)
                for c in records.customers
            ],
            PRODUCTS_FILE: [
                _join(
                    p.id,
                    p.name,
                    p.price,
                    p.category,
                    p.quantity,
                    p.seller_id,
                    p.rating_sum,
                    p.rating_count,
                )
                for p in records.products
            ],
            # ledger-pop order: each customer's most recent item first
            CARTS_FILE: [
                _join(c.id, item.product.id, item.buy_qty)
                for c in records.customers
                for item in c.cart.peek_all()
            ],
        }

        staged: List[Tuple[str, str]] = []
        try:
            for name, lines in contents.items():
                staged.append((self._stage(name, lines), self.path(name)))
        except Exception:
            for tmp_path, _ in staged:
                os.unlink(tmp_path)
            raise

        swapped = 0
        try:
            for tmp_path, target in staged:
                os.replace(tmp_path, target)
                swapped += 1
        finally:
            for tmp_path, _ in staged[swapped:]:
                os.unlink(tmp_path)

        _logger.info(
            f"Saved {len(records.sellers)} sellers, {len(records.customers)} "
            f"customers, {len(records.products)} products, "
            f"{len(contents[CARTS_FILE])} cart items to {self.data_dir}"
        )

    def _stage(self, name: str, lines: List[str]) -> str:
        for line in lines:
            if "\n" in line or line.count(DELIMITER) > _expected_delimiters(name):
                _logger.warning(f"{name}: field contains a delimiter: {line!r}")
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.data_dir,
            prefix=f".{name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            try:
                f.writelines(line + "\n" for line in lines)
            except Exception:
                f.close()
                os.unlink(f.name)
                raise
            return f.name

    # ---------------------------
    # Load
    # ---------------------------

    def load(self) -> LoadResult:
        """
        Rebuild a RecordStore from disk.

        Sellers, customers and products load first; cart lines are then
        joined against them by customer id and product id. Short lines and
        cart lines that do not resolve are returned as rejected records
        rather than raised. A field that should be numeric but is not raises
        LoadError and aborts the load.
        """
        rejected: List[RejectedRecord] = []

        sellers = [
            Seller(id=p.integer(f[0], "seller id"), name=f[1], email=f[2])
            for p, f in self._rows(SELLERS_FILE, SELLER_FIELDS, rejected)
        ]
        customers = [
            Customer(
                id=p.integer(f[0], "customer id"),
                name=f[1],
                address=f[2],
                phone=f[3],
                email=f[4],
            )
            for p, f in self._rows(CUSTOMERS_FILE, CUSTOMER_FIELDS, rejected)
        ]
        products = [
            Product(
                id=p.integer(f[0], "product id"),
                name=f[1],
                price=p.number(f[2], "price"),
                category=f[3],
                quantity=p.integer(f[4], "quantity", minimum=0),
                seller_id=p.integer(f[5], "seller id"),
                rating_sum=p.number(f[6], "rating sum"),
                rating_count=p.integer(f[7], "rating count", minimum=0),
            )
            for p, f in self._rows(PRODUCTS_FILE, PRODUCT_FIELDS, rejected)
        ]
        records = RecordStore(sellers, customers, products)
        self._load_carts(records, rejected)

        _logger.info(
            f"Loaded {len(sellers)} sellers, {len(customers)} customers, "
            f"{len(products)} products from {self.data_dir}"
        )
        return LoadResult(records=records, rejected=rejected)

    def _load_carts(
        self, records: RecordStore, rejected: List[RejectedRecord]
    ) -> None:
        staged: Dict[int, List[CartItem]] = defaultdict(list)
        for p, f in self._rows(CARTS_FILE, CART_FIELDS, rejected):
            cid = p.integer(f[0], "customer id")
            pid = p.integer(f[1], "product id")
            qty = p.integer(f[2], "quantity", minimum=1)

            customer = records.find_customer_by_id(cid)
            product = records.find_product_by_id(pid)
            if customer is None or product is None:
                reason = UNKNOWN_CUSTOMER if customer is None else UNKNOWN_PRODUCT
                rejected.append(self._reject(CARTS_FILE, p.line_no, p.line, reason))
                continue
            staged[cid].append(CartItem(product=product.snapshot(), buy_qty=qty))

        # lines were written top of stack first, so push them back bottom first
        for cid, items in staged.items():
            cart = records.find_customer_by_id(cid).cart
            for item in reversed(items):
                cart.push(item)

    def _rows(
        self, name: str, n_fields: int, rejected: List[RejectedRecord]
    ) -> Iterator[Tuple[_LineParser, List[str]]]:
        path = self.path(name)
        if not os.path.exists(path):
            _logger.debug(f"{path} does not exist, nothing to load")
            return
        with open(path, "r", encoding="utf-8") as f:
            for line_no, raw in enumerate(f, start=1):
                line = raw.rstrip("\r\n")
                fields = line.split(DELIMITER)
                if len(fields) < n_fields:
                    rejected.append(self._reject(name, line_no, line, MALFORMED))
                    continue
                yield _LineParser(name, line_no, line), fields

    @staticmethod
    def _reject(source: str, line_no: int, line: str, reason: str) -> RejectedRecord:
        _logger.warning(f"{source}:{line_no}: skipped ({reason}): {line!r}")
        return RejectedRecord(source=source, line_no=line_no, line=line, reason=reason)


def _expected_delimiters(name: str) -> int:
    return {
        SELLERS_FILE: SELLER_FIELDS,
        CUSTOMERS_FILE: CUSTOMER_FIELDS,
        PRODUCTS_FILE: PRODUCT_FIELDS,
        CARTS_FILE: CART_FIELDS,
    }[name] - 1
