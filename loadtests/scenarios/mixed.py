"""Mixed storefront workload scenario.

Combines journeys from both bounded contexts with weights that model a
storefront during a promotion. This is the recommended scenario for load
baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import (
    CategoryBrowserJourney,
    ProductShopperJourney,
    SaleEventCampaignJourney,
)
from loadtests.scenarios.messaging import BuyerChatJourney, ContactFormJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload simulating concurrent storefront activity.

    Catalogue (70%):
    - Product shopping: views, likes and sales on the counter paths
    - Sale event campaigns: enrollment plus discounted product reads
    - Category browsing: read-heavy listing traffic

    Messaging (30%):
    - Buyer chat: most common write in the messaging domain
    - Contact form: infrequent

    Exercises the DomainContextMiddleware's routing between the two
    domains under load.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        # Catalogue (70%)
        ProductShopperJourney: 40,
        SaleEventCampaignJourney: 15,
        CategoryBrowserJourney: 15,
        # Messaging (30%)
        BuyerChatJourney: 25,
        ContactFormJourney: 5,
    }
