"""Integration tests for wardrobe item endpoints, including image upload."""

import unittest

from fastapi.testclient import TestClient

from app.models.image import StoredImage
from tests.support import bearer, build_test_app, register_payload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class ItemsApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app, self.session_factory = build_test_app()
        self.client = TestClient(self.app)
        self.headers = bearer(self._token("johndoe", "john@example.com"))

    def _token(self, username: str, email: str) -> str:
        response = self.client.post(
            "/api/auth/register", json=register_payload(username=username, email=email)
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["accessToken"]

    def create(self, headers=None, files=None, **fields: str):
        data = {"name": "Blue shirt", "category": "TOPS"}
        data.update(fields)
        return self.client.post(
            "/api/items", data=data, files=files, headers=headers or self.headers
        )

    def image_count(self) -> int:
        db = self.session_factory()
        try:
            return db.query(StoredImage).count()
        finally:
            db.close()


class TestItemCrud(ItemsApiTestCase):
    def test_requires_authentication(self) -> None:
        self.assertEqual(self.client.get("/api/items").status_code, 401)
        response = self.client.post("/api/items", data={"name": "x", "category": "TOPS"})
        self.assertEqual(response.status_code, 401)

    def test_anonymous_form_errors_are_unauthorized(self) -> None:
        item_id = self.create().json()["id"]
        response = self.client.post("/api/items", data={"name": "x", "category": "hats"})
        self.assertEqual(response.status_code, 401)
        response = self.client.put(
            f"/api/items/{item_id}", data={"name": "x", "category": "TOPS", "room": "attic"}
        )
        self.assertEqual(response.status_code, 401)
        response = self.client.post("/api/items", data={"category": "TOPS"})
        self.assertEqual(response.status_code, 401)

    def test_create_and_get(self) -> None:
        response = self.create(
            room="wardrobe",
            color="blue",
            washingTemperature="40",
            canBeIroned="true",
            canBeBleached="false",
        )
        self.assertEqual(response.status_code, 201, response.text)
        item = response.json()
        self.assertEqual(item["name"], "Blue shirt")
        self.assertEqual(item["category"], "TOPS")
        self.assertEqual(item["room"], "WARDROBE")
        self.assertEqual(item["washingTemperature"], 40)
        self.assertTrue(item["canBeIroned"])
        self.assertFalse(item["canBeBleached"])
        self.assertIsNone(item["canBeTumbleDried"])
        self.assertFalse(item["hasImage"])

        fetched = self.client.get(f"/api/items/{item['id']}", headers=self.headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["id"], item["id"])

    def test_unknown_category_is_bad_request(self) -> None:
        response = self.create(category="hats")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unexpected category", response.json()["message"])

    def test_washing_temperature_out_of_range(self) -> None:
        response = self.create(washingTemperature="120")
        self.assertEqual(response.status_code, 400)
        self.assertIn("washingTemperature", response.json()["errors"])

    def test_list_and_filter_by_category(self) -> None:
        self.create(name="Shirt", category="TOPS")
        self.create(name="Jeans", category="BOTTOMS")
        all_items = self.client.get("/api/items", headers=self.headers).json()
        self.assertEqual(sorted(i["name"] for i in all_items), ["Jeans", "Shirt"])
        tops = self.client.get("/api/items?category=tops", headers=self.headers).json()
        self.assertEqual([i["name"] for i in tops], ["Shirt"])

    def test_list_only_shows_own_items(self) -> None:
        self.create()
        other = bearer(self._token("jane", "jane@example.com"))
        self.assertEqual(self.client.get("/api/items", headers=other).json(), [])

    def test_update_replaces_fields(self) -> None:
        item_id = self.create(color="blue").json()["id"]
        response = self.client.put(
            f"/api/items/{item_id}",
            data={"name": "Red shirt", "category": "TOPS"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Red shirt")
        self.assertIsNone(response.json()["color"])

    def test_delete(self) -> None:
        item_id = self.create().json()["id"]
        response = self.client.delete(f"/api/items/{item_id}", headers=self.headers)
        self.assertEqual(response.status_code, 204)
        missing = self.client.get(f"/api/items/{item_id}", headers=self.headers)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["error"], "Item Not Found")

    def test_other_users_item_is_forbidden(self) -> None:
        item_id = self.create().json()["id"]
        other = bearer(self._token("jane", "jane@example.com"))
        for method in ("get", "delete"):
            with self.subTest(method=method):
                response = getattr(self.client, method)(f"/api/items/{item_id}", headers=other)
                self.assertEqual(response.status_code, 403)
                self.assertEqual(response.json()["error"], "Access Denied")


class TestItemImages(ItemsApiTestCase):
    def test_upload_and_fetch_image(self) -> None:
        response = self.create(files={"image": ("shirt.png", PNG_BYTES, "image/png")})
        self.assertEqual(response.status_code, 201, response.text)
        item = response.json()
        self.assertTrue(item["hasImage"])

        image = self.client.get(f"/api/items/{item['id']}/image", headers=self.headers)
        self.assertEqual(image.status_code, 200)
        self.assertEqual(image.content, PNG_BYTES)
        self.assertEqual(image.headers["content-type"], "image/png")

    def test_item_without_image(self) -> None:
        item_id = self.create().json()["id"]
        response = self.client.get(f"/api/items/{item_id}/image", headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_rejects_non_image_upload(self) -> None:
        response = self.create(files={"image": ("notes.txt", b"hello", "text/plain")})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid image type", response.json()["message"])
        self.assertEqual(self.client.get("/api/items", headers=self.headers).json(), [])

    def test_rejects_oversized_upload(self) -> None:
        response = self.create(files={"image": ("big.png", b"\x00" * 2048, "image/png")})
        self.assertEqual(response.status_code, 400)
        self.assertIn("exceeds maximum", response.json()["message"])

    def test_update_replaces_image(self) -> None:
        item_id = self.create(files={"image": ("a.png", PNG_BYTES, "image/png")}).json()["id"]
        response = self.client.put(
            f"/api/items/{item_id}",
            data={"name": "Blue shirt", "category": "TOPS"},
            files={"image": ("b.webp", b"RIFF-webp-data", "image/webp")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(self.image_count(), 1)
        image = self.client.get(f"/api/items/{item_id}/image", headers=self.headers)
        self.assertEqual(image.content, b"RIFF-webp-data")

    def test_update_without_image_keeps_existing(self) -> None:
        item_id = self.create(files={"image": ("a.png", PNG_BYTES, "image/png")}).json()["id"]
        response = self.client.put(
            f"/api/items/{item_id}",
            data={"name": "Renamed", "category": "TOPS"},
            headers=self.headers,
        )
        self.assertTrue(response.json()["hasImage"])
        self.assertEqual(self.image_count(), 1)

    def test_delete_removes_image(self) -> None:
        item_id = self.create(files={"image": ("a.png", PNG_BYTES, "image/png")}).json()["id"]
        self.client.delete(f"/api/items/{item_id}", headers=self.headers)
        self.assertEqual(self.image_count(), 0)
