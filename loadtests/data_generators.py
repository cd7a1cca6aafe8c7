"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the exact field names expected by the API's Pydantic request
schemas.
"""

import random
import uuid
from datetime import date, timedelta

from faker import Faker

fake = Faker()

CATEGORY_IDS = [f"cat-{name}" for name in ("home", "kitchen", "fashion", "gifts", "outdoor", "toys")]


# ---------- Catalogue Domain ----------


def product_data() -> dict:
    """Generate CreateProductRequest payload.

    Discount must be non-zero: product creation treats 0 as missing.
    """
    word = fake.word().capitalize()
    quantity = random.randint(20, 500)
    return {
        "name": f"{word} {fake.word().capitalize()}"[:255],
        "price": round(random.uniform(4.99, 299.99), 2),
        "categories": random.sample(CATEGORY_IDS, k=random.randint(1, 3)),
        "description": fake.paragraph(nb_sentences=3),
        "discount": random.choice([5, 10, 15]),
        "quantity": quantity,
        "image_links": [f"https://cdn.example.com/images/{uuid.uuid4().hex}.jpg"],
    }


def product_update() -> dict:
    """Generate UpdateProductRequest payload touching price and stock."""
    return {
        "price": round(random.uniform(4.99, 299.99), 2),
        "quantity": random.randint(20, 500),
    }


def search_term() -> str:
    return fake.word()


def event_window(days: int = 10) -> tuple[str, str]:
    """An event window starting today, as ISO dates."""
    start = date.today()
    return start.isoformat(), (start + timedelta(days=days)).isoformat()


def event_data() -> dict:
    """Generate CreateEventRequest payload running from today."""
    start, end = event_window()
    return {
        "name": f"{fake.word().capitalize()} Sale"[:255],
        "description": fake.sentence(nb_words=10),
        "start_date": start,
        "end_date": end,
        "location": random.choice(["Online", "Hanoi", "Ho Chi Minh City", "Da Nang"]),
        "image_links": [f"https://cdn.example.com/banners/{uuid.uuid4().hex}.jpg"],
    }


def enrollment_data(product_ids: list[str]) -> dict:
    """Generate AddProductsRequest payload for the first half of the event window."""
    start, end = event_window(days=5)
    return {
        "product_ids": product_ids,
        "discount": random.choice([10, 20, 30, 40]),
        "start_date": start,
        "end_date": end,
    }


# ---------- Messaging Domain ----------


def buyer_id() -> str:
    return f"buyer-{uuid.uuid4().hex[:8]}"


def chat_message() -> str:
    return fake.sentence(nb_words=random.randint(4, 16))


def contact_data() -> dict:
    """Generate SubmitContactRequest payload."""
    return {
        "name": fake.name()[:150],
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
        "phone": fake.phone_number()[:30],
        "title": fake.sentence(nb_words=4)[:255],
        "message": fake.paragraph(nb_sentences=2),
    }
