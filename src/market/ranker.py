# on-demand ordering of products by average rating

import heapq
from typing import Iterable, List

from market.models import Product


def rank_by_rating(products: Iterable[Product]) -> List[Product]:
    """
    Return products by descending average rating, rebuilt on every call.

    Products with equal averages keep their collection order.
    """
    # the index keeps equal ratings in insertion order and stops the heap
    # from ever comparing two Products
    heap = [(-p.average_rating, idx, p) for idx, p in enumerate(products)]
    heapq.heapify(heap)
    return [heapq.heappop(heap)[2] for _ in range(len(heap))]
