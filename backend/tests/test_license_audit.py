"""
API tests for /licenseAudit.
"""

from tests.helpers import ANNUAL, API


class TestLicenseAudit:
    """Tests for GET /licenseAudit?licenseId=n."""

    async def test_license_id_required(self, client):
        response = await client.get(f"{API}/licenseAudit")
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required field: licenseId"

    async def test_license_id_must_be_numeric(self, client):
        response = await client.get(f"{API}/licenseAudit", params={"licenseId": "abc"})
        assert response.status_code == 400

    async def test_unknown_license_has_no_history(self, client):
        response = await client.get(f"{API}/licenseAudit", params={"licenseId": 999})
        assert response.status_code == 200
        assert response.json() == []

    async def test_rows_are_scoped_to_the_license(self, client):
        first = (await client.post(f"{API}/licenses", json={"typeId": ANNUAL})).json()
        second = (await client.post(f"{API}/licenses", json={"typeId": ANNUAL})).json()
        await client.put(f"{API}/licenses/{first['id']}", json={"externalName": "renamed"})

        first_rows = (await client.get(f"{API}/licenseAudit", params={"licenseId": first["id"]})).json()
        second_rows = (await client.get(f"{API}/licenseAudit", params={"licenseId": second["id"]})).json()

        assert len(first_rows) == 1
        assert second_rows == []
        assert {r["licenseIdRef"] for r in first_rows} == {first["id"]}
        assert first_rows[0]["externalName"] == "renamed"

    async def test_rows_carry_lookup_names(self, client):
        created = (await client.post(f"{API}/licenses", json={"typeId": ANNUAL})).json()
        await client.put(f"{API}/licenses/{created['id']}", json={"comment": "checked"})

        [row] = (await client.get(f"{API}/licenseAudit", params={"licenseId": created["id"]})).json()
        assert row["typeName"] == "Annual"
        assert row["statusName"] == "Available"
        assert row["serverId"] is None
        assert row["serverName"] == "N/A"
        assert "createdAt" in row
