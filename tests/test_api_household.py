# -*- coding: utf-8 -*-

from __future__ import annotations

import base64
import json
import os
import shutil
import sys
import tempfile
import unittest
from datetime import date, timedelta
from pathlib import Path
from typing import List
from unittest import mock

import httpx
from fastapi.testclient import TestClient


def _model_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestHouseholdApi(unittest.TestCase):
    """Sign-in, households, profiles, schedule, meal log and feedback."""

    replies: List[str] = []

    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="mealplanner-test-"))
        os.environ["MEALPLAN_PROJECT_ID"] = "test-project"
        os.environ["MEALPLAN_STORAGE_BACKEND"] = "local"
        os.environ["MEALPLAN_DATA_ROOT"] = str(cls._tmp / "data")
        os.environ["MEALPLAN_JWT_SECRET"] = "test-secret"
        os.environ["GOOGLE_CLIENT_ID"] = "client-id"
        os.environ["GOOGLE_CLIENT_SECRET"] = "client-secret"

        for name in list(sys.modules.keys()):
            if name == "mealplanner" or name.startswith("mealplanner."):
                sys.modules.pop(name, None)

        from mealplanner.api import app  # noqa: WPS433
        from mealplanner.auth.security import create_access_token
        from mealplanner.gateway import GatewaySettings, GeminiGateway, set_gateway

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_model_reply(cls.replies.pop(0)))

        config = GatewaySettings(
            base_url="https://gemini.test/v1beta", model="gemini-test", api_key="k", timeout=5, temperature=0
        )
        set_gateway(GeminiGateway(config, transport=httpx.MockTransport(handler)))
        cls.create_access_token = staticmethod(create_access_token)
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        try:
            cls.client.close()
        except Exception:
            pass
        shutil.rmtree(cls._tmp, ignore_errors=True)
        for key in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"):
            os.environ.pop(key, None)

    def setUp(self) -> None:
        type(self).replies = []

    def _headers(self, email: str) -> dict:
        return {"Authorization": f"Bearer {self.create_access_token(email=email)}"}

    # ---- auth ----

    def test_health_is_public(self) -> None:
        from mealplanner.api import app  # noqa: WPS433

        unauth = TestClient(app)
        self.assertEqual(unauth.get("/api/health").json(), {"ok": True})
        unauth.close()

    def test_auth_required(self) -> None:
        from mealplanner.api import app  # noqa: WPS433

        unauth = TestClient(app)
        for path in ("/api/inventory", "/api/household", "/api/meals/history", "/api/auth/me"):
            self.assertEqual(unauth.get(path).status_code, 401, path)
        resp = unauth.get("/api/inventory", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(resp.status_code, 401)
        unauth.close()

    def test_oauth_sign_in_creates_household(self) -> None:
        from mealplanner.api import app  # noqa: WPS433

        browser = TestClient(app)
        resp = browser.get("/api/auth/login", follow_redirects=False)
        self.assertEqual(resp.status_code, 302)
        self.assertTrue(resp.headers["location"].startswith("https://accounts.google.com/"))
        state = httpx.URL(resp.headers["location"]).params["state"]

        with mock.patch("mealplanner.auth.api.exchange_code_for_email", return_value="Newbie@Example.com"):
            resp = browser.get(f"/api/auth/callback?code=abc&state={state}", follow_redirects=False)
        self.assertEqual(resp.status_code, 302, resp.text)
        self.assertIn("mealplan_token", resp.cookies)

        me = browser.get("/api/auth/me")
        self.assertEqual(me.status_code, 200, me.text)
        self.assertEqual(me.json()["email"], "newbie@example.com")
        self.assertTrue(me.json()["household_id"])
        browser.close()

    def test_oauth_callback_rejects_state_mismatch(self) -> None:
        from mealplanner.api import app  # noqa: WPS433

        browser = TestClient(app)
        browser.get("/api/auth/login", follow_redirects=False)
        resp = browser.get("/api/auth/callback?code=abc&state=forged", follow_redirects=False)
        self.assertEqual(resp.status_code, 401)
        browser.close()

    # ---- household ----

    def test_household_and_invite(self) -> None:
        alice = self._headers("alice@example.com")
        bob = self._headers("bob@example.com")
        info = self.client.get("/api/household", headers=alice).json()
        self.assertEqual(info["members"], ["alice@example.com"])
        self.assertEqual(
            info["onboarding"],
            {"has_inventory": False, "has_schedule": False, "has_members": False, "complete": False},
        )

        self.client.post("/api/shopping-list/items", json={"name": "Bob's beer"}, headers=bob)

        resp = self.client.post("/api/household/invite", json={"email": " Bob@Example.com "}, headers=alice)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["invited"], "bob@example.com")
        self.assertEqual(resp.json()["household_id"], info["household_id"])

        # Bob now sees Alice's household, not his old list.
        self.client.post("/api/inventory/items", json={"name": "Eggs"}, headers=alice)
        self.assertEqual(self.client.get("/api/shopping-list", headers=bob).json()["count"], 0)
        self.assertEqual(self.client.get("/api/inventory", headers=bob).json()["count"], 1)

        info = self.client.get("/api/household", headers=bob).json()
        self.assertEqual(info["members"], ["alice@example.com", "bob@example.com"])
        self.assertTrue(info["onboarding"]["has_members"])
        self.assertTrue(info["onboarding"]["has_inventory"])
        self.assertFalse(info["onboarding"]["complete"])

        meal = {"date": date.today().isoformat(), "slot": "dinner", "recipe_id": "r1", "recipe_title": "Frittata"}
        self.client.put("/api/schedule", json=meal, headers=alice)
        self.assertTrue(self.client.get("/api/household", headers=bob).json()["onboarding"]["complete"])

    def test_corrupt_registry_is_a_json_error(self) -> None:
        from mealplanner.blobstore import get_blob_store  # noqa: WPS433
        from mealplanner.household.registry import REGISTRY_PATH  # noqa: WPS433

        h = self._headers("corrupt@example.com")
        self.client.get("/api/household", headers=h)
        blobs = get_blob_store()
        original = blobs.get(REGISTRY_PATH)
        self.addCleanup(blobs.put, REGISTRY_PATH, original)

        blobs.put(REGISTRY_PATH, original[:-3])
        resp = self.client.get("/api/household", headers=h)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Failed to resolve household", "error": "RegistryUnreadable"})
        self.assertEqual(blobs.get(REGISTRY_PATH), original[:-3])

    def test_invite_validates_email(self) -> None:
        resp = self.client.post("/api/household/invite", json={"email": "nobody"}, headers=self._headers("x@example.com"))
        self.assertEqual(resp.status_code, 422)

    # ---- profiles / settings ----

    def test_profiles_default_then_replace(self) -> None:
        h = self._headers("profiles@example.com")
        data = self.client.get("/api/profiles", headers=h).json()
        self.assertTrue(data["is_default"])
        self.assertEqual([p["id"] for p in data["profiles"]], ["wife", "son", "dad"])

        profiles = [{"id": "mum", "name": "Mum", "dietaryNeeds": "Low carb"}]
        resp = self.client.put("/api/profiles", json={"profiles": profiles}, headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        data = self.client.get("/api/profiles", headers=h).json()
        self.assertFalse(data["is_default"])
        self.assertEqual(data["profiles"][0]["dietary_needs"], "Low carb")

        dupes = [{"id": "a", "name": "A"}, {"id": "a", "name": "B"}]
        self.assertEqual(self.client.put("/api/profiles", json={"profiles": dupes}, headers=h).status_code, 400)

    def test_settings_defaults_and_update(self) -> None:
        h = self._headers("settings@example.com")
        data = self.client.get("/api/settings", headers=h).json()
        self.assertEqual(data["net_carb_limit"], 15)
        self.assertEqual(data["diet_protocol"], "Super Gut")
        resp = self.client.put("/api/settings", json={"net_carb_limit": 20, "staples": ["ghee"]}, headers=h)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/settings", headers=h).json()["staples"], ["ghee"])

    # ---- schedule ----

    def test_schedule_set_replace_and_clear(self) -> None:
        h = self._headers("planner@example.com")
        today = date.today()
        day = today.isoformat()
        later = (today + timedelta(days=20)).isoformat()

        meal = {"date": day, "slot": "dinner", "recipe_id": "r1", "recipe_title": "Frittata", "attendees": ["son"]}
        self.client.put("/api/schedule", json=meal, headers=h)
        self.client.put("/api/schedule", json={**meal, "recipe_id": "r2", "recipe_title": "Curry"}, headers=h)
        self.client.put("/api/schedule", json={**meal, "slot": "lunch"}, headers=h)
        resp = self.client.put("/api/schedule", json={**meal, "date": later}, headers=h)
        meals = resp.json()["meals"]
        self.assertEqual([(m["date"], m["slot"], m["recipe_title"]) for m in meals],
                         [(day, "lunch", "Frittata"), (day, "dinner", "Curry"), (later, "dinner", "Frittata")])

        upcoming = self.client.get("/api/schedule?days=7", headers=h).json()
        self.assertEqual(upcoming["count"], 2)

        week = self.client.get(f"/api/schedule/week?start={day}", headers=h).json()
        self.assertEqual(len(week["days"]), 7)
        self.assertEqual(len(week["days"][0]["meals"]), 2)

        resp = self.client.delete(f"/api/schedule/{day}?slot=lunch", headers=h)
        self.assertEqual(resp.json()["count"], 2)
        resp = self.client.delete(f"/api/schedule/{day}", headers=h)
        self.assertEqual([m["date"] for m in resp.json()["meals"]], [later])

        self.assertTrue(self.client.get("/api/household", headers=h).json()["onboarding"]["has_schedule"])

    def test_schedule_rejects_bad_dates(self) -> None:
        h = self._headers("baddate@example.com")
        meal = {"date": "2026-13-45", "slot": "dinner", "recipe_id": "r1", "recipe_title": "Frittata"}
        self.assertEqual(self.client.put("/api/schedule", json=meal, headers=h).status_code, 400)
        self.assertEqual(self.client.put("/api/schedule", json={**meal, "date": "soon"}, headers=h).status_code, 422)

    # ---- meals ----

    def test_analyze_uses_household_limit(self) -> None:
        h = self._headers("analyst@example.com")
        image = {"image_mime": "image/png", "image_base64": base64.b64encode(b"\x89PNG fake image data").decode()}
        self.client.put("/api/settings", json={"net_carb_limit": 10}, headers=h)

        self.replies.append(json.dumps({"netCarbs": "12g", "compliant": True, "notes": "Potatoes"}))
        resp = self.client.post("/api/meals/analyze", json={**image, "description": "Steak and chips"}, headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertEqual(data["analysis"]["net_carbs"], 12)
        self.assertFalse(data["analysis"]["compliant"])
        self.assertEqual(data["net_carb_limit"], 10)

        self.replies.append(json.dumps({"netCarbs": "8-12g (3g fiber)", "compliant": False}))
        resp = self.client.post("/api/meals/analyze", json=image, headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["analysis"]["net_carbs"], 8)
        self.assertTrue(resp.json()["analysis"]["compliant"])

        self.replies.append("no idea")
        self.assertEqual(self.client.post("/api/meals/analyze", json=image, headers=h).status_code, 502)
        self.assertEqual(self.client.get("/api/meals/history", headers=h).json()["count"], 0)

    def test_log_and_history(self) -> None:
        h = self._headers("logger@example.com")
        for d, title in (("2026-10-01", "Soup"), ("2026-10-05", "Salad"), ("2026-10-09", "Stew")):
            resp = self.client.post("/api/meals/log", json={"date": d, "slot": "dinner", "recipe_title": title}, headers=h)
            self.assertEqual(resp.status_code, 200, resp.text)
            self.assertTrue(resp.json()["id"])
            self.assertTrue(resp.json()["logged_at"].endswith("Z"))

        history = self.client.get("/api/meals/history", headers=h).json()
        self.assertEqual([e["recipe_title"] for e in history["entries"]], ["Stew", "Salad", "Soup"])

        ranged = self.client.get("/api/meals/history?start=2026-10-02&end=2026-10-09", headers=h).json()
        self.assertEqual([e["recipe_title"] for e in ranged["entries"]], ["Stew", "Salad"])

        page = self.client.get("/api/meals/history?limit=1&offset=1", headers=h).json()
        self.assertEqual(page["count"], 3)
        self.assertEqual([e["recipe_title"] for e in page["entries"]], ["Salad"])

    # ---- feedback ----

    def test_feedback_newest_first(self) -> None:
        h = self._headers("Critic@Example.com")
        self.client.post("/api/feedback", json={"type": "Bug Report", "message": "Scan is slow"}, headers=h)
        resp = self.client.post("/api/feedback", json={"message": "Love it"}, headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["user"], "critic@example.com")
        self.assertEqual(resp.json()["type"], "Suggestion")

        entries = self.client.get("/api/feedback", headers=h).json()["entries"]
        self.assertEqual([e["message"] for e in entries], ["Love it", "Scan is slow"])
        self.assertEqual(self.client.post("/api/feedback", json={"message": "   "}, headers=h).status_code, 400)
        self.assertEqual(self.client.post("/api/feedback", json={"type": "Rant", "message": "x"}, headers=h).status_code, 422)


if __name__ == "__main__":
    unittest.main()
