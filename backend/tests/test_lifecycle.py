"""
License lifecycle tests: request activation, activate, deactivate.

Transitions report refusals in a 200 body with ``success: false``; the
caller is expected to check the returned status.
"""

from datetime import datetime

import pytest
from sqlalchemy import update

from app.models.server import Server
from app.services.lifecycle import add_years
from tests.helpers import ANNUAL, API, AVAILABLE, DEACTIVATED, PERPETUAL, b64


@pytest.fixture
def licensed_customer(client, create_customer, create_server, create_purchase_order, add_license):
    """Customer C with server S and purchase order P1 holding one license."""
    async def _setup(type_id=ANNUAL, duration=2):
        customer = await create_customer()
        server = await create_server(customer_id=customer["id"], name="srv-c", fingerprint="fp-c")
        po = await create_purchase_order(customer["id"])
        license = await add_license(po["id"], type_id=type_id, duration=duration)
        return customer, server, po, license
    return _setup


async def _request(client, license_id, **body):
    return await client.post(f"{API}/licenses/{license_id}/request-activation", json=body)


async def _activate(client, license_id, **body):
    return await client.post(f"{API}/licenses/{license_id}/activate", json=body or None)


async def _deactivate(client, license_id, **body):
    return await client.post(f"{API}/licenses/{license_id}/deactivate", json=body or None)


# ============================================
# REQUEST ACTIVATION
# ============================================

class TestRequestActivation:
    """Available -> Activation Requested."""

    async def test_by_server_id(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()

        response = await _request(
            client, license["id"], customerId=customer["id"], serverId=server["id"]
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["license"]["status"] == "Activation Requested"
        assert data["license"]["serverId"] == server["id"]
        assert data["license"]["serverName"] == "srv-c"

    async def test_by_fingerprint(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()

        response = await _request(client, license["id"], customerId=customer["id"], fingerprint=b64("fp-c"))
        assert response.status_code == 200
        assert response.json()["license"]["serverId"] == server["id"]

    async def test_unknown_fingerprint(self, client, licensed_customer):
        customer, _, _, license = await licensed_customer()

        response = await _request(client, license["id"], customerId=customer["id"], fingerprint=b64("nope"))
        assert response.status_code == 400

    async def test_server_of_another_customer(self, client, licensed_customer, create_customer, create_server):
        customer, _, _, license = await licensed_customer()
        stranger = await create_customer(businessName="Stranger")
        foreign = await create_server(customer_id=stranger["id"], name="srv-s", fingerprint="fp-s")

        response = await _request(client, license["id"], customerId=customer["id"], serverId=foreign["id"])
        assert response.status_code == 400

        unchanged = await client.get(f"{API}/licenses/{license['id']}")
        assert unchanged.json()["status"] == "Available"
        assert unchanged.json()["serverId"] is None

    async def test_license_of_another_customer(
        self, client, licensed_customer, create_customer, create_server
    ):
        """A customer cannot claim a license bought on someone else's purchase order."""
        _, _, _, license = await licensed_customer()
        other = await create_customer(businessName="Other")
        other_server = await create_server(customer_id=other["id"], name="srv-o", fingerprint="fp-o")

        response = await _request(client, license["id"], customerId=other["id"], serverId=other_server["id"])
        assert response.status_code == 400
        assert "purchase order" in response.json()["detail"]

        unchanged = await client.get(f"{API}/licenses/{license['id']}")
        assert unchanged.json()["status"] == "Available"
        assert unchanged.json()["serverId"] is None

    async def test_license_without_purchase_order(self, client, create_customer, create_server):
        customer = await create_customer()
        server = await create_server(customer_id=customer["id"], name="srv-c", fingerprint="fp-c")
        loose = (await client.post(f"{API}/licenses", json={"typeId": ANNUAL})).json()

        response = await _request(client, loose["id"], customerId=customer["id"], serverId=server["id"])
        assert response.status_code == 400

    async def test_server_reference_required(self, client, licensed_customer):
        customer, _, _, license = await licensed_customer()

        response = await _request(client, license["id"], customerId=customer["id"])
        assert response.status_code == 400

    async def test_only_from_available(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        again = await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])
        assert again.status_code == 409

    async def test_unknown_license(self, client):
        response = await _request(client, 999, customerId=1, serverId=1)
        assert response.status_code == 404


# ============================================
# ACTIVATE
# ============================================

class TestActivate:
    """Activation Requested -> Activated."""

    async def test_expiration_is_activation_plus_term(self, client, licensed_customer):
        """Annual license with a 2-year join row expires two years after activation."""
        customer, server, _, license = await licensed_customer(type_id=ANNUAL, duration=2)
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        response = await _activate(client, license["id"], comment="go live", updatedBy="ada")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True

        activated = data["license"]
        assert activated["status"] == "Activated"
        activation = datetime.fromisoformat(activated["activationDate"])
        expiration = datetime.fromisoformat(activated["expirationDate"])
        assert expiration == add_years(activation, 2)
        assert activated["updatedBy"] == "ada"

    async def test_renewals_extend_the_term(self, client, licensed_customer):
        customer, server, po, license = await licensed_customer(duration=2)
        await client.post(
            f"{API}/purchaseOrders/{po['id']}/licenses",
            json={"licenseId": license["id"], "duration": 1},
        )
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        activated = (await _activate(client, license["id"])).json()["license"]
        activation = datetime.fromisoformat(activated["activationDate"])
        assert datetime.fromisoformat(activated["expirationDate"]) == add_years(activation, 3)

    async def test_perpetual_type_never_expires(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer(type_id=PERPETUAL, duration=1)
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        activated = (await _activate(client, license["id"])).json()["license"]
        assert activated["status"] == "Activated"
        assert activated["activationDate"] is not None
        assert activated["expirationDate"] is None

    async def test_perpetual_duration_never_expires(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer(type_id=ANNUAL, duration=0)
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        activated = (await _activate(client, license["id"])).json()["license"]
        assert activated["expirationDate"] is None

    async def test_without_request_reports_failure(self, client, licensed_customer):
        """Activating an Available license is refused without changing it."""
        _, _, _, license = await licensed_customer()

        response = await _activate(client, license["id"])
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["license"]["status"] == "Available"
        assert data["license"]["activationDate"] is None

    async def test_server_without_fingerprint_reports_failure(
        self, client, licensed_customer, session_factory
    ):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        async with session_factory() as session:
            await session.execute(
                update(Server).where(Server.id == server["id"]).values(fingerprint=b"")
            )
            await session.commit()

        data = (await _activate(client, license["id"])).json()
        assert data["success"] is False
        assert "fingerprint" in data["message"]
        assert data["license"]["status"] == "Activation Requested"

    async def test_refusal_writes_no_audit_row(self, client, licensed_customer):
        _, _, _, license = await licensed_customer()
        before = (await client.get(f"{API}/licenseAudit", params={"licenseId": license["id"]})).json()

        await _activate(client, license["id"])

        after = (await client.get(f"{API}/licenseAudit", params={"licenseId": license["id"]})).json()
        assert len(after) == len(before)


# ============================================
# DEACTIVATE
# ============================================

class TestDeactivate:
    """Activated -> Available."""

    async def test_clears_dates_and_server(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])
        await _activate(client, license["id"])

        response = await _deactivate(client, license["id"], comment="decommissioned")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["license"]["status"] == "Available"
        assert data["license"]["activationDate"] is None
        assert data["license"]["expirationDate"] is None
        assert data["license"]["serverId"] is None

    async def test_never_lands_on_legacy_deactivated_state(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])
        await _activate(client, license["id"])

        data = (await _deactivate(client, license["id"])).json()
        assert data["license"]["licenseStatusId"] == AVAILABLE
        assert data["license"]["licenseStatusId"] != DEACTIVATED

    async def test_cancels_pending_request(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        data = (await _deactivate(client, license["id"])).json()
        assert data["success"] is True
        assert data["license"]["serverId"] is None

    async def test_from_available_reports_failure(self, client, licensed_customer):
        _, _, _, license = await licensed_customer()

        data = (await _deactivate(client, license["id"])).json()
        assert data["success"] is False
        assert data["license"]["status"] == "Available"


# ============================================
# HISTORY AND REFERENCES
# ============================================

class TestLifecycleHistory:
    """Audit rows and referential integrity around transitions."""

    async def test_every_transition_is_audited_newest_first(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])
        await _activate(client, license["id"], comment="activated")
        await _deactivate(client, license["id"], comment="released")

        response = await client.get(f"{API}/licenseAudit", params={"licenseId": license["id"]})
        rows = response.json()
        assert [r["statusName"] for r in rows] == [
            "Available",
            "Activated",
            "Activation Requested",
            "Available",
        ]
        assert rows[0]["comment"] == "released"
        assert rows[0]["serverName"] == "N/A"
        assert rows[1]["serverName"] == "srv-c"
        assert [r["auditId"] for r in rows] == sorted((r["auditId"] for r in rows), reverse=True)

    async def test_server_in_use_cannot_be_deleted(self, client, licensed_customer):
        customer, server, _, license = await licensed_customer()
        await _request(client, license["id"], customerId=customer["id"], serverId=server["id"])

        response = await client.delete(f"{API}/servers/{server['id']}")
        assert response.status_code == 409
