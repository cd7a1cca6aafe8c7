"""Application tests for likes, views and sales."""

import json

import pytest
from catalogue.likes.like_list import LikeList, like_list_id
from catalogue.likes.liking import LikeProduct, UnlikeProduct
from catalogue.product import counters
from catalogue.product.counters import IncrementSell, IncrementView, process_with_retry
from catalogue.product.creation import CreateProduct
from catalogue.product.product import Product
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError
from protean.utils.globals import current_domain


@pytest.fixture()
def product_id():
    return current_domain.process(
        CreateProduct(
            name="Conical Hat",
            price=12.0,
            categories=json.dumps(["cat-hats"]),
            description="Palm leaf non la",
            discount=5,
            quantity=2,
        ),
        asynchronous=False,
    )


def _product(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestLikes:
    def test_first_like_creates_like_list(self, product_id):
        count = current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)

        assert count == 1
        like_list = current_domain.repository_for(LikeList).for_user("user-1")
        assert like_list.product_ids == [product_id]

    def test_one_like_list_per_user(self, product_id):
        other_id = current_domain.process(
            CreateProduct(
                name="Lacquer Box",
                price=30.0,
                categories=json.dumps(["cat-home"]),
                description="Red lacquer",
                discount=0,
                quantity=4,
            ),
            asynchronous=False,
        )

        current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)
        current_domain.process(LikeProduct(product_id=other_id, user_id="user-1"), asynchronous=False)

        rows = current_domain.repository_for(LikeList)._dao.query.filter(user_id="user-1").all().items
        assert [row.id for row in rows] == [like_list_id("user-1")]
        assert rows[0].product_ids == [product_id, other_id]

    def test_second_like_from_same_user_is_rejected(self, product_id):
        current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)

        with pytest.raises(InvalidOperationError):
            current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)

        assert _product(product_id).like_count == 1

    def test_likes_from_different_users_add_up(self, product_id):
        current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)
        current_domain.process(LikeProduct(product_id=product_id, user_id="user-2"), asynchronous=False)
        assert _product(product_id).like_count == 2

    def test_like_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(LikeProduct(product_id="missing", user_id="user-1"), asynchronous=False)

    def test_unlike(self, product_id):
        current_domain.process(LikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)
        count = current_domain.process(UnlikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)

        assert count == 0
        assert current_domain.repository_for(LikeList).for_user("user-1").product_ids == []

    def test_unlike_without_like_is_rejected(self, product_id):
        with pytest.raises(InvalidOperationError):
            current_domain.process(UnlikeProduct(product_id=product_id, user_id="user-1"), asynchronous=False)


class TestViewsAndSales:
    def test_views_are_not_deduplicated(self, product_id):
        current_domain.process(IncrementView(product_id=product_id), asynchronous=False)
        current_domain.process(IncrementView(product_id=product_id), asynchronous=False)
        assert _product(product_id).view_count == 2

    def test_sales_stop_at_quantity(self, product_id):
        current_domain.process(IncrementSell(product_id=product_id), asynchronous=False)
        current_domain.process(IncrementSell(product_id=product_id), asynchronous=False)

        with pytest.raises(InvalidOperationError):
            current_domain.process(IncrementSell(product_id=product_id), asynchronous=False)

        assert _product(product_id).sell_count == 2


class _FlakyDomain:
    """Fails with a version conflict a fixed number of times, then succeeds."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def process(self, command, asynchronous=True):
        self.calls += 1
        if self.calls <= self.failures:
            raise ExpectedVersionError("version mismatch")
        return "done"


class TestProcessWithRetry:
    def test_retries_after_version_conflict(self, monkeypatch):
        flaky = _FlakyDomain(failures=2)
        monkeypatch.setattr(counters, "current_domain", flaky)

        assert process_with_retry(IncrementView(product_id="p1"), attempts=3) == "done"
        assert flaky.calls == 3

    def test_gives_up_after_last_attempt(self, monkeypatch):
        flaky = _FlakyDomain(failures=5)
        monkeypatch.setattr(counters, "current_domain", flaky)

        with pytest.raises(ExpectedVersionError):
            process_with_retry(IncrementView(product_id="p1"), attempts=2)
        assert flaky.calls == 2

    def test_other_errors_are_not_retried(self, product_id):
        process_with_retry(IncrementSell(product_id=product_id))
        process_with_retry(IncrementSell(product_id=product_id))
        with pytest.raises(InvalidOperationError):
            process_with_retry(IncrementSell(product_id=product_id))


class TestStaleWrites:
    def test_stale_view_write_is_rejected(self, product_id):
        repo = current_domain.repository_for(Product)
        first = repo.get(product_id)
        second = repo.get(product_id)

        first.record_view()
        second.record_view()
        repo.add(first)

        with pytest.raises(ExpectedVersionError):
            repo.add(second)

        assert _product(product_id).view_count == 1

    def test_stale_like_write_is_rejected(self, product_id):
        repo = current_domain.repository_for(Product)
        first = repo.get(product_id)
        second = repo.get(product_id)

        first.record_like("user-1")
        second.record_like("user-2")
        repo.add(first)

        with pytest.raises(ExpectedVersionError):
            repo.add(second)

        assert _product(product_id).like_count == 1

    def test_retry_reloads_after_concurrent_write(self, product_id):
        repo = current_domain.repository_for(Product)
        stale = repo.get(product_id)
        current_domain.process(IncrementView(product_id=product_id), asynchronous=False)

        stale.record_view()
        with pytest.raises(ExpectedVersionError):
            repo.add(stale)

        process_with_retry(IncrementView(product_id=product_id))
        assert _product(product_id).view_count == 2
