import unittest

from api_case import ApiTestCase
from models.service_category import ServiceCategory
from models.service_request import ServiceRequest


class TestCategoryListing(ApiTestCase):
    def test_lists_every_seeded_category(self):
        names = ["Electrician", "Plumber", "Painting"]
        self.seed_categories(*names)

        resp = self.client.get("/api/services")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body), len(names))
        self.assertEqual({c["name"] for c in body}, set(names))
        for c in body:
            self.assertEqual(set(c), {"id", "name"})

    def test_empty_listing(self):
        self.assertEqual(self.client.get("/api/services").json(), [])

    def test_get_by_id(self):
        ids = self.seed_categories("Plumber")
        resp = self.client.get(f"/api/services/{ids['Plumber']}")
        self.assertEqual(resp.json(), {"id": ids["Plumber"], "name": "Plumber"})
        self.assertEqual(self.client.get("/api/services/999").status_code, 404)


class TestCategoryAdministration(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_admin()
        self.admin = self.auth("root", "rootpw")
        self.register("alice", "pw1")
        self.customer = self.auth("alice", "pw1")

    def test_admin_creates_category(self):
        resp = self.client.post("/api/services", json={"name": "Roofing"}, headers=self.admin)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["name"], "Roofing")
        self.assertEqual(self.db.query(ServiceCategory).count(), 1)

    def test_customer_cannot_create_category(self):
        resp = self.client.post("/api/services", json={"name": "Roofing"}, headers=self.customer)
        self.assertEqual(resp.status_code, 403)

    def test_anonymous_cannot_create_category(self):
        resp = self.client.post("/api/services", json={"name": "Roofing"})
        self.assertEqual(resp.status_code, 401)

    def test_duplicate_name_conflicts(self):
        self.seed_categories("Plumber")
        resp = self.client.post("/api/services", json={"name": "Plumber"}, headers=self.admin)
        self.assertEqual(resp.status_code, 409)

    def test_blank_name_is_rejected(self):
        resp = self.client.post("/api/services", json={"name": "   "}, headers=self.admin)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(self.db.query(ServiceCategory).count(), 0)

    def test_rename_to_blank_is_rejected(self):
        ids = self.seed_categories("Plumber")
        resp = self.client.put(f"/api/services/{ids['Plumber']}", json={"name": "   "}, headers=self.admin)

        self.assertEqual(resp.status_code, 422)
        self.db.expire_all()
        self.assertEqual(self.db.query(ServiceCategory).one().name, "Plumber")

    def test_name_is_stored_trimmed(self):
        resp = self.client.post("/api/services", json={"name": "  Roofing "}, headers=self.admin)
        self.assertEqual(resp.json()["name"], "Roofing")

    def test_rename(self):
        ids = self.seed_categories("Plumer")
        resp = self.client.put(f"/api/services/{ids['Plumer']}", json={"name": "Plumber"}, headers=self.admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Plumber")

    def test_delete_unused_category(self):
        ids = self.seed_categories("Painting")
        resp = self.client.delete(f"/api/services/{ids['Painting']}", headers=self.admin)
        self.assertEqual(resp.json(), {"deleted": True})
        self.assertEqual(self.db.query(ServiceCategory).count(), 0)

    def test_delete_category_in_use_conflicts(self):
        ids = self.seed_categories("Plumber")
        self.client.post(
            "/api/bookService",
            json={"description": "Leaky faucet", "categoryId": ids["Plumber"]},
            headers=self.customer,
        )
        resp = self.client.delete(f"/api/services/{ids['Plumber']}", headers=self.admin)

        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.db.query(ServiceRequest).count(), 1)

    def test_missing_category_is_404(self):
        self.assertEqual(self.client.delete("/api/services/42", headers=self.admin).status_code, 404)
        self.assertEqual(
            self.client.put("/api/services/42", json={"name": "Nope"}, headers=self.admin).status_code,
            404,
        )


if __name__ == "__main__":
    unittest.main()
