"""Messaging domain load test scenarios.

A buyer opens a chat about a product and trades messages with the store;
the contact form gets occasional traffic. Live delivery over the
WebSocket channel is not driven here, only the persisted REST path.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import buyer_id, chat_message, contact_data
from loadtests.helpers.response import envelope_data
from loadtests.helpers.state import ChatState

STORE_ID = "admin"


class BuyerChatJourney(SequentialTaskSet):
    """Start chat -> Buyer/store exchange x4 -> Inbox -> Mark read -> History."""

    def on_start(self):
        self.state = ChatState(buyer_id=buyer_id(), product_id=f"prod-{random.randint(1, 200)}")

    @task
    def start_chat(self):
        with self.client.post(
            "/chats",
            json={"senderId": self.state.buyer_id, "productId": self.state.product_id},
            catch_response=True,
            name="POST /chats",
        ) as resp:
            if resp.status_code == 201:
                self.state.chat_id = envelope_data(resp)["id"]
            else:
                resp.failure(f"Start chat failed: {resp.status_code}")
                self.interrupt()

    @task
    def exchange_messages(self):
        for turn in range(4):
            sender = self.state.buyer_id if turn % 2 == 0 else STORE_ID
            with self.client.post(
                "/chats/messages",
                json={"chatId": self.state.chat_id, "content": chat_message()},
                headers={"X-User-Id": sender},
                catch_response=True,
                name="POST /chats/messages",
            ) as resp:
                if resp.status_code == 200:
                    self.state.message_count += 1
                else:
                    resp.failure(f"Send message failed: {resp.status_code}")

    @task
    def check_inbox(self):
        with self.client.get(
            f"/chats/inbox/{self.state.buyer_id}",
            catch_response=True,
            name="GET /chats/inbox/{user_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Inbox failed: {resp.status_code}")

    @task
    def mark_read(self):
        with self.client.post(
            f"/chats/{self.state.chat_id}/read",
            headers={"X-User-Id": self.state.buyer_id},
            catch_response=True,
            name="POST /chats/{id}/read",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Mark read failed: {resp.status_code}")

    @task
    def load_history(self):
        with self.client.get(
            f"/chats/user/{self.state.buyer_id}",
            catch_response=True,
            name="GET /chats/user/{user_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"History failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class ContactFormJourney(SequentialTaskSet):
    @task
    def submit(self):
        with self.client.post(
            "/contacts",
            json=contact_data(),
            catch_response=True,
            name="POST /contacts",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Contact submission failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class MessagingUser(HttpUser):
    """Locust user simulating buyer/store chat and contact traffic.

    Weighted distribution:
    - 80% Buyer Chat
    - 20% Contact Form
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        BuyerChatJourney: 4,
        ContactFormJourney: 1,
    }
