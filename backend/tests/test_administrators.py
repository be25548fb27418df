"""
API tests for /administrators.

Covers the shared CRUD conventions: status codes, secret redaction,
base64 decoding, uniqueness conflicts and partial updates.
"""

from tests.helpers import API, admin_payload, b64


# ============================================
# CREATE
# ============================================

class TestCreateAdministrator:
    """Tests for POST /administrators."""

    async def test_create_returns_record_without_password(self, client):
        """Create returns 201 with camelCase fields and no secret."""
        response = await client.post(f"{API}/administrators", json=admin_payload())
        assert response.status_code == 201
        data = response.json()

        assert data["login"] == "ada"
        assert data["firstName"] == "Ada"
        assert data["isActive"] is True
        assert "password" not in data
        assert "passwordEncrypted" not in data
        assert isinstance(data["id"], int)

    async def test_missing_required_field_is_bad_request(self, client):
        """Missing login returns 400 and nothing is persisted."""
        payload = admin_payload()
        del payload["login"]

        response = await client.post(f"{API}/administrators", json=payload)
        assert response.status_code == 400
        assert "login" in response.json()["detail"]

        listing = await client.get(f"{API}/administrators")
        assert listing.json() == []

    async def test_invalid_base64_password(self, client):
        """A password that is not base64 returns 400."""
        response = await client.post(
            f"{API}/administrators", json=admin_payload(password="not base64!!")
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Base64 encoding for password"

    async def test_duplicate_login_conflicts(self, client):
        """Second administrator with the same login returns 409."""
        first = await client.post(f"{API}/administrators", json=admin_payload())
        second = await client.post(
            f"{API}/administrators", json=admin_payload(email="other@acmecorp.com")
        )
        assert first.status_code == 201
        assert second.status_code == 409

        listing = await client.get(f"{API}/administrators")
        assert len(listing.json()) == 1

    async def test_duplicate_email_conflicts(self, client):
        """Second administrator with the same email returns 409."""
        await client.post(f"{API}/administrators", json=admin_payload())
        response = await client.post(f"{API}/administrators", json=admin_payload(login="ada2"))
        assert response.status_code == 409


# ============================================
# READ / UPDATE / DELETE
# ============================================

class TestAdministratorById:
    """Tests for /administrators/{id}."""

    async def test_round_trip(self, client):
        """Reading back a created administrator matches the create response."""
        created = (await client.post(f"{API}/administrators", json=admin_payload())).json()

        response = await client.get(f"{API}/administrators/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    async def test_non_numeric_id_is_bad_request(self, client):
        response = await client.get(f"{API}/administrators/abc")
        assert response.status_code == 400

    async def test_unknown_id_is_not_found(self, client):
        response = await client.get(f"{API}/administrators/999")
        assert response.status_code == 404

    async def test_partial_update_keeps_other_fields(self, client):
        """PUT with one field changes only that field; id/createdAt are ignored."""
        created = (await client.post(f"{API}/administrators", json=admin_payload())).json()

        response = await client.put(
            f"{API}/administrators/{created['id']}",
            json={"lastName": "Lovelace", "id": 12345, "createdAt": "2000-01-01T00:00:00"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created["id"]
        assert data["lastName"] == "Lovelace"
        assert data["firstName"] == "Ada"
        assert data["createdAt"] == created["createdAt"]

    async def test_patch_is_accepted(self, client):
        created = (await client.post(f"{API}/administrators", json=admin_payload())).json()

        response = await client.patch(
            f"{API}/administrators/{created['id']}",
            json={"isActive": False, "password": b64("new-secret")},
        )
        assert response.status_code == 200
        assert response.json()["isActive"] is False
        assert "password" not in response.json()

    async def test_update_unknown_id(self, client):
        response = await client.put(f"{API}/administrators/999", json={"lastName": "X"})
        assert response.status_code == 404

    async def test_update_to_taken_login_conflicts(self, client):
        await client.post(f"{API}/administrators", json=admin_payload())
        other = (
            await client.post(
                f"{API}/administrators",
                json=admin_payload(login="bob", email="bob@acmecorp.com"),
            )
        ).json()

        response = await client.put(f"{API}/administrators/{other['id']}", json={"login": "ada"})
        assert response.status_code == 409

    async def test_explicit_null_is_rejected(self, client):
        created = (await client.post(f"{API}/administrators", json=admin_payload())).json()

        response = await client.put(f"{API}/administrators/{created['id']}", json={"login": None})
        assert response.status_code == 400

    async def test_delete(self, client):
        """Delete returns 204, then the record is gone."""
        created = (await client.post(f"{API}/administrators", json=admin_payload())).json()

        response = await client.delete(f"{API}/administrators/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""

        again = await client.get(f"{API}/administrators/{created['id']}")
        assert again.status_code == 404

    async def test_delete_unknown_id(self, client):
        response = await client.delete(f"{API}/administrators/999")
        assert response.status_code == 404
