import unittest

from market.models import Product
from market.ranker import rank_by_rating


def _rated(pid: int, *ratings: int) -> Product:
    product = Product(
        id=pid, name=f"P{pid}", price=1.0, category="c", quantity=1, seller_id=1
    )
    for r in ratings:
        product.add_rating(r)
    return product


class RankByRatingTestCase(unittest.TestCase):
    def setUp(self):
        self.products = [
            _rated(1, 3),
            _rated(2, 5, 4),
            _rated(3),
            _rated(4, 5),
            _rated(5, 4, 5),
        ]

    def test_order_is_non_increasing(self):
        ranked = rank_by_rating(self.products)
        averages = [p.average_rating for p in ranked]
        self.assertEqual(averages, sorted(averages, reverse=True))
        self.assertEqual(len(ranked), len(self.products))

    def test_ties_keep_collection_order(self):
        ranked = rank_by_rating(self.products)
        self.assertEqual([p.id for p in ranked], [4, 2, 5, 1, 3])

    def test_ranking_reflects_current_ratings(self):
        self.assertEqual(rank_by_rating(self.products)[0].id, 4)
        self.products[3].add_rating(1)
        self.assertEqual(rank_by_rating(self.products)[0].id, 2)

    def test_does_not_mutate_input(self):
        before = list(self.products)
        rank_by_rating(self.products)
        self.assertEqual(self.products, before)

    def test_accepts_any_iterable(self):
        ranked = rank_by_rating(p for p in self.products if p.id != 4)
        self.assertEqual([p.id for p in ranked], [2, 5, 1, 3])

    def test_empty_collection(self):
        self.assertEqual(rank_by_rating([]), [])


if __name__ == "__main__":
    unittest.main()
