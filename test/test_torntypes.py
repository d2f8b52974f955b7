"""Tests for the torntypes command line utility."""

import io
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests
from jsoncomparison import NO_DIFF, Compare

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from torntypes.torntypes import generate_types, main
from torntypes.tornapi import TornApiClient

TORN_DIR = os.path.join(os.path.dirname(current_script_path), "torn")
V1_URL = "https://schema.example.com/api/v1"
V2_URL = "https://www.example.com/swagger/openapi.json"


def load_fixture(name):
    with open(os.path.join(TORN_DIR, f"{name}.json"), "r", encoding="utf-8") as f:
        return json.load(f)


def fake_get(failing=()):
    documents = {
        f"{V1_URL}/sections": load_fixture("sections"),
        f"{V1_URL}/errors": load_fixture("errors"),
        f"{V1_URL}/schema/user": load_fixture("user"),
        f"{V1_URL}/schema/faction": load_fixture("faction"),
        V2_URL: load_fixture("openapi"),
    }

    def get(url, timeout=None):
        response = MagicMock()
        if url in failing:
            response.raise_for_status.side_effect = requests.HTTPError(f"500 Server Error for url: {url}")
        response.json.return_value = documents[url]
        return response
    return get


class TestTornTypes(unittest.TestCase):
    """Test cases for generating the combined declarations."""

    def setUp(self):
        self.out_dir = tempfile.mkdtemp()
        self.out_path = os.path.join(self.out_dir, "dist", "index.ts")

    def tearDown(self):
        shutil.rmtree(self.out_dir, ignore_errors=True)

    def run_main(self, *extra_args, failing=()):
        args = ["--out", self.out_path, "--v1-url", V1_URL, "--v2-url", V2_URL, *extra_args]
        with patch("torntypes.tornapi.requests.get", side_effect=fake_get(failing)):
            main(args)

    def test_generate_types(self):
        with patch("torntypes.tornapi.requests.get", side_effect=fake_get()):
            types, openapi_doc = generate_types(TornApiClient(V1_URL, V2_URL))
        v1_header = "// Auto-generated TypeScript types for Torn API V1"
        v2_header = "// Auto-generated TypeScript types for Torn API V2"
        self.assertTrue(types.startswith(v1_header))
        self.assertIn("\n" + v2_header, types)
        self.assertLess(types.index("export enum TornApiError"), types.index(v2_header))
        self.assertEqual(openapi_doc["info"]["title"], "Torn API")

    def test_generate_types_without_v2(self):
        with patch("torntypes.tornapi.requests.get", side_effect=fake_get()):
            types, openapi_doc = generate_types(TornApiClient(V1_URL, V2_URL), include_v2=False)
        self.assertIsNone(openapi_doc)
        self.assertNotIn("Torn API V2", types)

    def test_main_writes_output(self):
        self.run_main()
        with open(self.out_path, "r", encoding="utf-8") as f:
            content = f.read()
        self.assertIn("export interface UserV1BasicResponse {", content)
        self.assertIn("interface UserBasic {", content)

        openapi_path = os.path.join(os.path.dirname(self.out_path), "openapi.json")
        with open(openapi_path, "r", encoding="utf-8") as f:
            dumped = json.load(f)
        self.assertEqual(Compare().check(dumped, load_fixture("openapi")), NO_DIFF)

    def test_main_is_idempotent(self):
        self.run_main()
        with open(self.out_path, "r", encoding="utf-8") as f:
            first = f.read()
        self.run_main()
        with open(self.out_path, "r", encoding="utf-8") as f:
            self.assertEqual(f.read(), first)

    def test_main_custom_openapi_path(self):
        openapi_path = os.path.join(self.out_dir, "schemas", "torn-v2.json")
        self.run_main("--openapi-out", openapi_path)
        self.assertTrue(os.path.exists(openapi_path))

    def test_main_without_v2(self):
        self.run_main("--no-v2")
        self.assertTrue(os.path.exists(self.out_path))
        self.assertFalse(os.path.exists(os.path.join(os.path.dirname(self.out_path), "openapi.json")))

    def test_fetch_failure_writes_nothing(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            with self.assertRaises(SystemExit) as ctx:
                self.run_main(failing={f"{V1_URL}/schema/faction"})
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Error: ", stdout.getvalue())
        self.assertFalse(os.path.exists(self.out_path))

    def test_v2_failure_keeps_previous_output(self):
        os.makedirs(os.path.dirname(self.out_path))
        with open(self.out_path, "w", encoding="utf-8") as f:
            f.write("previous")
        with patch("sys.stdout", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                self.run_main(failing={V2_URL})
        with open(self.out_path, "r", encoding="utf-8") as f:
            self.assertEqual(f.read(), "previous")

    def test_version(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            main(["--version"])
        self.assertTrue(stdout.getvalue().startswith("torntypes "))


if __name__ == '__main__':
    unittest.main()
