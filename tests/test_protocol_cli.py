# -*- coding: utf-8 -*-

from __future__ import annotations

import io
import json
import os
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from typing import List
from unittest import mock

import httpx

_GUIDE = {
    "rules": ["Keep net carbs at or below 15 g per meal"],
    "banned_ingredients": ["wheat", "sugar"],
    "allowed_ingredients": "inulin\npsyllium",
    "recipes": [{"title": "SIBO Yogurt", "ingredients": ["milk", "L. reuteri"], "instructions": "Ferment 36 hours"}],
    "tips": ["Start slowly"],
}


class TestProtocolCli(unittest.TestCase):
    prompts: List[str] = []
    replies: List[str] = []

    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="mealplanner-protocol-"))
        os.environ["MEALPLAN_PROJECT_ID"] = "test-project"
        os.environ["MEALPLAN_STORAGE_BACKEND"] = "local"
        os.environ["MEALPLAN_DATA_ROOT"] = str(cls._tmp / "data")

        for name in list(sys.modules.keys()):
            if name == "mealplanner" or name.startswith("mealplanner."):
                sys.modules.pop(name, None)

        from mealplanner.gateway import GatewaySettings, GeminiGateway, set_gateway

        def handler(request: httpx.Request) -> httpx.Response:
            cls.prompts.append(json.loads(request.content)["contents"][0]["parts"][0]["text"])
            text = cls.replies.pop(0)
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

        config = GatewaySettings(
            base_url="https://gemini.test/v1beta", model="gemini-test", api_key="k", timeout=5, temperature=0
        )
        set_gateway(GeminiGateway(config, transport=httpx.MockTransport(handler)))

        cls.book = cls._tmp / "book.txt"
        cls.book.write_text("Chapter 1. " + "Fermented foods matter. " * 50, encoding="utf-8")

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        type(self).prompts = []
        type(self).replies = []

    def _run(self, *argv: str) -> tuple[int, str]:
        from mealplanner.protocol.cli import main  # noqa: WPS433

        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_extract_writes_guide_and_updates_household(self) -> None:
        from mealplanner.profiles.storage import get_settings  # noqa: WPS433

        self.replies.append("```json\n" + json.dumps(_GUIDE) + "\n```")
        target = self._tmp / "guide.json"
        code, output = self._run(
            "extract", str(self.book), "-o", str(target), "--partition", "house1", "--max-chars", "100"
        )
        self.assertEqual(code, 0, output)
        self.assertIn("Read 100 characters", output)
        self.assertEqual(len(self.prompts), 1)
        self.assertNotIn("Fermented foods matter. " * 10, self.prompts[0])

        guide = json.loads(target.read_text(encoding="utf-8"))
        self.assertEqual(guide["allowed_ingredients"], ["inulin", "psyllium"])
        self.assertEqual(guide["recipes"][0]["instructions"], ["Ferment 36 hours"])

        household = get_settings("house1")
        self.assertEqual(household.diet_protocol, "Super Gut")
        self.assertEqual(
            household.protocol_rules,
            ["Keep net carbs at or below 15 g per meal", "Avoid: wheat, sugar", "Prefer: inulin, psyllium"],
        )

        code, output = self._run("show", str(target))
        self.assertEqual(code, 0)
        self.assertIn("SIBO Yogurt", output)
        self.assertIn("Banned ingredients (2)", output)

    def test_unreadable_household_settings_are_not_overwritten(self) -> None:
        from mealplanner.blobstore import get_blob_store  # noqa: WPS433

        blobs = get_blob_store()
        cases = {
            "house2": b'{"net_carb_limit": 30, "kitchen_notes": "Has microwave"',
            "house3": b'{"net_carb_limit": "plenty", "kitchen_notes": "Has microwave"}',
        }
        for partition, stored in cases.items():
            blobs.put(f"{partition}/settings.json", stored)
            self.replies.append(json.dumps(_GUIDE))
            code, output = self._run(
                "extract", str(self.book), "-o", str(self._tmp / f"{partition}.json"), "--partition", partition
            )
            self.assertEqual(code, 1, output)
            self.assertIn("could not update household settings", output)
            self.assertEqual(blobs.get(f"{partition}/settings.json"), stored)

    def test_partition_update_requires_project_id(self) -> None:
        from mealplanner.blobstore import get_blob_store  # noqa: WPS433
        from mealplanner.config import settings  # noqa: WPS433

        with mock.patch.object(settings, "project_id", None):
            code, output = self._run("extract", str(self.book), "--partition", "house4")
        self.assertEqual(code, 1)
        self.assertIn("MEALPLAN_PROJECT_ID", output)
        self.assertEqual(self.prompts, [])
        self.assertFalse(get_blob_store().exists("house4/settings.json"))

    def test_extract_failure_writes_nothing(self) -> None:
        self.replies.append("{}")
        target = self._tmp / "empty.json"
        code, output = self._run("extract", str(self.book), "-o", str(target))
        self.assertEqual(code, 1)
        self.assertIn("empty guide", output)
        self.assertFalse(target.exists())

    def test_pdf_books_use_pdf_reader(self) -> None:
        from mealplanner.protocol import extractor  # noqa: WPS433

        pdf = self._tmp / "book.pdf"
        pdf.write_bytes(b"%PDF-1.4 placeholder")
        with mock.patch.object(extractor, "_read_pdf", return_value="Page one. Page two.") as read_pdf:
            text = extractor.read_text(pdf, budget=9)
        read_pdf.assert_called_once_with(pdf)
        self.assertEqual(text, "Page one.")

    def test_missing_inputs(self) -> None:
        code, _ = self._run("extract", str(self._tmp / "nope.txt"))
        self.assertEqual(code, 1)
        code, _ = self._run("show", str(self._tmp / "nope.json"))
        self.assertEqual(code, 1)
        self.assertEqual(self.prompts, [])


if __name__ == "__main__":
    unittest.main()
