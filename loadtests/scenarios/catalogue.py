"""Catalogue domain load test scenarios.

Stateful SequentialTaskSet journeys covering product browsing, counter
traffic and sale event campaigns. Steps execute in order; each depends on
the previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    CATEGORY_IDS,
    buyer_id,
    enrollment_data,
    event_data,
    product_data,
    product_update,
    search_term,
)
from loadtests.helpers.response import envelope_data
from loadtests.helpers.state import ProductState, SaleEventState


class ProductShopperJourney(SequentialTaskSet):
    """Create -> View x3 -> Like -> Sell -> Search -> Unlike.

    Models a product being listed and then browsed by a shopper. The view,
    like and sell steps hit the contended counter paths.
    """

    def on_start(self):
        self.state = ProductState()
        self.user_id = buyer_id()

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = envelope_data(resp)["id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}")
                self.interrupt()

    @task
    def read_product(self):
        with self.client.get(
            f"/products/{self.state.product_id}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read product failed: {resp.status_code}")

    @task
    def view_product(self):
        for _ in range(3):
            with self.client.post(
                f"/products/{self.state.product_id}/view",
                catch_response=True,
                name="POST /products/{id}/view",
            ) as resp:
                if resp.status_code == 200:
                    self.state.view_count = envelope_data(resp)["count"]
                else:
                    resp.failure(f"View failed: {resp.status_code}")

    @task
    def like_product(self):
        with self.client.post(
            f"/products/{self.state.product_id}/like",
            headers={"X-User-Id": self.user_id},
            catch_response=True,
            name="POST /products/{id}/like",
        ) as resp:
            if resp.status_code == 200:
                self.state.liked = True
            else:
                resp.failure(f"Like failed: {resp.status_code}")

    @task
    def sell_product(self):
        with self.client.post(
            f"/products/{self.state.product_id}/sell",
            catch_response=True,
            name="POST /products/{id}/sell",
        ) as resp:
            if resp.status_code == 200:
                self.state.sell_count = envelope_data(resp)["count"]
            else:
                resp.failure(f"Sell failed: {resp.status_code}")

    @task
    def search(self):
        with self.client.get(
            "/products/search",
            params={"q": search_term(), "limit": 10},
            catch_response=True,
            name="GET /products/search",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code}")

    @task
    def unlike_product(self):
        if not self.state.liked:
            self.interrupt()
        with self.client.delete(
            f"/like-lists/{self.state.product_id}",
            headers={"X-User-Id": self.user_id},
            catch_response=True,
            name="DELETE /like-lists/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unlike failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class SaleEventCampaignJourney(SequentialTaskSet):
    """Create products -> Create event -> Enroll -> Read discounted -> Clear slot -> Delete.

    Exercises enrollment and discount resolution on product reads.
    """

    def on_start(self):
        self.state = SaleEventState()

    @task
    def create_products(self):
        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(envelope_data(resp)["id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code}")
        if not self.state.product_ids:
            self.interrupt()

    @task
    def create_event(self):
        with self.client.post(
            "/events",
            json=event_data(),
            catch_response=True,
            name="POST /events",
        ) as resp:
            if resp.status_code == 201:
                self.state.event_id = envelope_data(resp)["id"]
            else:
                resp.failure(f"Create event failed: {resp.status_code}")
                self.interrupt()

    @task
    def enroll_products(self):
        payload = enrollment_data(self.state.product_ids)
        with self.client.post(
            f"/events/{self.state.event_id}/products",
            json=payload,
            catch_response=True,
            name="POST /events/{id}/products",
        ) as resp:
            if resp.status_code == 201:
                self.state.applicable_product_ids = [
                    item["applicable_product_id"] for item in envelope_data(resp)
                ]
                self.state.window = (payload["start_date"], payload["end_date"])
            else:
                resp.failure(f"Enroll failed: {resp.status_code}")
                self.interrupt()

    @task
    def read_discounted_product(self):
        with self.client.get(
            f"/products/{random.choice(self.state.product_ids)}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read product failed: {resp.status_code}")
            elif not envelope_data(resp)["is_in_event"]:
                resp.failure("Enrolled product is not in the event")

    @task
    def read_event(self):
        with self.client.get(
            f"/events/{self.state.event_id}",
            catch_response=True,
            name="GET /events/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read event failed: {resp.status_code}")

    @task
    def clear_time_slot(self):
        start, end = self.state.window
        with self.client.delete(
            f"/events/{self.state.event_id}/timeslot",
            params={"start": start, "end": end},
            catch_response=True,
            name="DELETE /events/{id}/timeslot",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Clear time slot failed: {resp.status_code}")

    @task
    def delete_event(self):
        with self.client.delete(
            f"/events/{self.state.event_id}",
            catch_response=True,
            name="DELETE /events/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delete event failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class CategoryBrowserJourney(SequentialTaskSet):
    """List a category -> Update one of its products.

    Read-heavy traffic against the category listing.
    """

    @task
    def browse_category(self):
        with self.client.get(
            f"/products/category/{random.choice(CATEGORY_IDS)}",
            catch_response=True,
            name="GET /products/category/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Category listing failed: {resp.status_code}")
                self.interrupt()
            self.products = envelope_data(resp)

    @task
    def update_product(self):
        if not self.products:
            self.interrupt()
        with self.client.put(
            f"/products/{random.choice(self.products)['id']}",
            json=product_update(),
            catch_response=True,
            name="PUT /products/{id}",
        ) as resp:
            if resp.status_code not in (200, 404):
                resp.failure(f"Update product failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class CatalogueUser(HttpUser):
    """Locust user simulating Catalogue domain interactions.

    Weighted distribution:
    - 60% Product Shopper (counters, likes, search)
    - 25% Sale Event Campaign
    - 15% Category Browser
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        ProductShopperJourney: 12,
        SaleEventCampaignJourney: 5,
        CategoryBrowserJourney: 3,
    }
