"""
Locust load tests for the scratch-card API.

Install: pip install locust
Run: locust -f locustfile.py --host=http://127.0.0.1:5050

For headless: locust -f locustfile.py --host=http://127.0.0.1:5050 \
    --users 10 --spawn-rate 2 --run-time 1m --headless

Verification writes a ledger row on every call; point this at a scratch
database, never production.
"""

import os
import uuid
from locust import HttpUser, task, between


class ScratchcardAPIUser(HttpUser):
    wait_time = between(1, 3)

    def on_start(self):
        """Optional: admin login for the back-office endpoints."""
        self.token = None
        if os.getenv("LOCUST_ADMIN_USERNAME") and os.getenv("LOCUST_ADMIN_PASSWORD"):
            r = self.client.post(
                "/api/auth/login",
                json={
                    "username": os.getenv("LOCUST_ADMIN_USERNAME"),
                    "password": os.getenv("LOCUST_ADMIN_PASSWORD"),
                },
            )
            if r.status_code == 200 and "access_token" in r.json():
                self.token = r.json()["access_token"]

    def _headers(self):
        h = {"Content-Type": "application/json"}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    @task(10)
    def ping(self):
        self.client.get("/__ping")

    @task(6)
    def code_status(self):
        code = os.getenv("LOCUST_CODE", "ABC123")
        self.client.get("/api/codes/status", params={"code": code})

    @task(4)
    def verify_unknown_code(self):
        # unknown codes never touch the ledger
        self.client.post(
            "/api/verify",
            json={
                "code": f"LOAD-{uuid.uuid4().hex[:10]}",
                "name": "Load Test",
                "phone": "03000000000",
            },
            name="/api/verify [invalid]",
        )

    @task(2)
    def claim_queue(self):
        if not self.token:
            return
        self.client.get("/api/admin/claimable-prizes", headers=self._headers())

    @task(1)
    def metrics(self):
        if not self.token:
            return
        self.client.get("/admin/metrics", headers=self._headers())
