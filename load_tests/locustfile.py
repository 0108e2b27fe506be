"""Locust load test for the stamp tour check/redeem flow."""

from __future__ import annotations

import os
import random
from typing import List

from locust import FastHttpUser, between, task

COOKIE_NAME = os.getenv("STAMP_TOUR_SESSION_COOKIE", "user_id")
STAMP_IDS: List[str] = [s for s in os.getenv("STAMP_TOUR_LOAD_STAMPS", "A1,B2,C3").split(",") if s]


class Participant(FastHttpUser):
    wait_time = between(1, 5)

    def on_start(self) -> None:
        response = self.client.post("/login", json={"user_name": f"locust-{random.randint(0, 99999)}"})
        self.user_id = response.json()["user_id"]

    @task
    def visit_and_collect(self) -> None:
        cookies = {COOKIE_NAME: self.user_id}
        self.client.get(f"/check?checkpoint={random.choice(STAMP_IDS)}", cookies=cookies, allow_redirects=False)
        self.client.get("/redeem", cookies=cookies, name="/redeem")
