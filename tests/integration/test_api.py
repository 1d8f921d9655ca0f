"""
Integration tests for the HTTP API.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from marketplace.api.app import create_app
from marketplace.api.dependencies import (
    get_notification_enqueuer,
    get_offer_dispatch_enqueuer,
)
from marketplace.api.routes.health import get_health_checker
from marketplace.config.database import get_db_session
from marketplace.domain.entities.offer_call import OfferCall
from marketplace.infrastructure.database.repositories.offer_call_repository import (
    OfferCallRepository,
)
from marketplace.infrastructure.monitoring.health_checks import HealthChecker

pytestmark = pytest.mark.integration

API = "/api/v1"


@pytest.fixture
def notification_enqueuer():
    return MagicMock()


@pytest.fixture
def offer_enqueuer():
    return MagicMock()


@pytest.fixture
def app(db_session, notification_enqueuer, offer_enqueuer):
    application = create_app()

    async def override_db_session():
        yield db_session

    async def override_health_checker():
        checker = HealthChecker(db_session)
        checker.checks.pop("redis")
        return checker

    application.dependency_overrides[get_db_session] = override_db_session
    application.dependency_overrides[get_health_checker] = override_health_checker
    application.dependency_overrides[get_notification_enqueuer] = (
        lambda: notification_enqueuer
    )
    application.dependency_overrides[get_offer_dispatch_enqueuer] = (
        lambda: offer_enqueuer
    )
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as async_client:
        yield async_client


def as_user(user):
    return {"X-User-Id": str(user.id)}


class TestHealthEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get(f"{API}/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_ready_and_live(self, client):
        assert (await client.get(f"{API}/health/ready")).json()["status"] == "ready"
        assert (await client.get(f"{API}/health/live")).json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_detailed(self, client):
        response = await client.get(f"{API}/health/detailed")

        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_metrics(self, client):
        response = await client.get(f"{API}/health/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")


class TestJobEndpoints:
    """Job listing, claiming, matching and offers."""

    @pytest.mark.asyncio
    async def test_list_open_jobs(self, client, seeded):
        response = await client.get(f"{API}/jobs/", headers=as_user(seeded["contractor"]))

        assert response.status_code == 200
        jobs = response.json()
        assert [job["id"] for job in jobs] == [str(seeded["job"].id)]
        assert jobs[0]["title"] == "Leaky faucet"
        assert jobs[0]["offer_state"] == "UNCLAIMED"

    @pytest.mark.asyncio
    async def test_customer_cannot_list_jobs(self, client, seeded):
        response = await client.get(f"{API}/jobs/", headers=as_user(seeded["customer"]))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_identity(self, client, seeded):
        response = await client.get(f"{API}/jobs/")

        assert response.status_code == 401
        assert response.json()["type"] == "http_error"

    @pytest.mark.asyncio
    async def test_claim_job(self, client, seeded, notification_enqueuer):
        # Act
        response = await client.post(
            f"{API}/jobs/{seeded['job'].id}/claim",
            headers=as_user(seeded["contractor"]),
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Job claimed successfully"
        assert body["job"]["claimed_by_contractor_id"] == str(seeded["contractor"].id)
        assert body["appointment"]["status"] == "SCHEDULED"
        assert body["appointment"]["estimated_duration"] == 90
        notification_enqueuer.assert_called_once()

    @pytest.mark.asyncio
    async def test_claim_twice_conflicts(self, client, seeded):
        url = f"{API}/jobs/{seeded['job'].id}/claim"
        await client.post(url, headers=as_user(seeded["contractor"]))

        response = await client.post(url, headers=as_user(seeded["contractor"]))

        assert response.status_code == 409
        assert (
            response.json()["message"]
            == "Job was already claimed by another contractor"
        )

    @pytest.mark.asyncio
    async def test_customer_claiming_taken_job_is_forbidden(self, client, seeded):
        url = f"{API}/jobs/{seeded['job'].id}/claim"
        await client.post(url, headers=as_user(seeded["contractor"]))

        response = await client.post(url, headers=as_user(seeded["customer"]))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_claim_unknown_job(self, client, seeded):
        response = await client.post(
            f"{API}/jobs/{uuid4()}/claim", headers=as_user(seeded["contractor"])
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_customer_cannot_claim(self, client, seeded):
        response = await client.post(
            f"{API}/jobs/{seeded['job'].id}/claim",
            headers=as_user(seeded["customer"]),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_matches(self, client, seeded):
        response = await client.get(
            f"{API}/jobs/{seeded['job'].id}/matches",
            headers=as_user(seeded["customer"]),
        )

        assert response.status_code == 200
        matches = response.json()
        assert len(matches) == 1
        assert matches[0]["contractor_id"] == str(seeded["contractor"].id)
        assert matches[0]["matched_skills"] == ["plumbing"]

    @pytest.mark.asyncio
    async def test_dispatch_offers(self, client, seeded, offer_enqueuer):
        response = await client.post(
            f"{API}/jobs/{seeded['job'].id}/offers",
            headers=as_user(seeded["customer"]),
        )

        assert response.status_code == 202
        assert response.json()["message"] == "Offer dispatch queued"
        offer_enqueuer.assert_called_once_with(seeded["job"].id)

    @pytest.mark.asyncio
    async def test_dispatch_offers_for_claimed_job(
        self, client, seeded, offer_enqueuer
    ):
        await client.post(
            f"{API}/jobs/{seeded['job'].id}/claim",
            headers=as_user(seeded["contractor"]),
        )

        response = await client.post(
            f"{API}/jobs/{seeded['job'].id}/offers",
            headers=as_user(seeded["customer"]),
        )

        assert response.status_code == 409
        offer_enqueuer.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatch_queue_down(self, client, seeded, offer_enqueuer):
        offer_enqueuer.side_effect = ConnectionError("broker down")

        response = await client.post(
            f"{API}/jobs/{seeded['job'].id}/offers",
            headers=as_user(seeded["customer"]),
        )

        assert response.status_code == 503


class TestAvailabilityEndpoints:
    @pytest.mark.asyncio
    async def test_replace_availability(self, client, seeded):
        # Act
        response = await client.put(
            f"{API}/availability/",
            headers=as_user(seeded["contractor"]),
            json={
                "availability": [
                    {"dayOfWeek": "friday", "startTime": "09:00", "endTime": "12:00"},
                    {"day_of_week": "MONDAY", "start_time": "13:00", "end_time": "17:00"},
                    {"dayOfWeek": "MONDAY", "startTime": "17:00", "endTime": "09:00"},
                ]
            },
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Availability updated successfully"
        assert body["saved"] == 2
        assert body["dropped"] == 1
        assert [slot["day_of_week"] for slot in body["availability"]] == [
            "MONDAY",
            "FRIDAY",
        ]
        assert [slot["duration_minutes"] for slot in body["availability"]] == [240, 180]

        listing = await client.get(
            f"{API}/availability/", headers=as_user(seeded["contractor"])
        )
        assert len(listing.json()["availability"]) == 2

    @pytest.mark.asyncio
    async def test_customer_cannot_set_availability(self, client, seeded):
        response = await client.put(
            f"{API}/availability/",
            headers=as_user(seeded["customer"]),
            json={"availability": []},
        )

        assert response.status_code == 403


class TestAppointmentEndpoints:
    @pytest.mark.asyncio
    async def test_list_and_update(self, client, seeded):
        # Arrange
        claim = await client.post(
            f"{API}/jobs/{seeded['job'].id}/claim",
            headers=as_user(seeded["contractor"]),
        )
        appointment_id = claim.json()["appointment"]["id"]

        # Act
        listing = await client.get(
            f"{API}/appointments/", headers=as_user(seeded["customer"])
        )
        update = await client.patch(
            f"{API}/appointments/{appointment_id}",
            headers=as_user(seeded["contractor"]),
            json={"status": "CONFIRMED", "contractor_notes": "On my way"},
        )

        # Assert
        assert [a["id"] for a in listing.json()] == [appointment_id]
        assert update.status_code == 200
        assert update.json()["status"] == "CONFIRMED"
        assert update.json()["contractor_notes"] == "On my way"

    @pytest.mark.asyncio
    async def test_customer_cannot_set_price(self, client, seeded):
        claim = await client.post(
            f"{API}/jobs/{seeded['job'].id}/claim",
            headers=as_user(seeded["contractor"]),
        )
        appointment_id = claim.json()["appointment"]["id"]

        response = await client.patch(
            f"{API}/appointments/{appointment_id}",
            headers=as_user(seeded["customer"]),
            json={"final_price": "10.00"},
        )

        assert response.status_code == 403


class TestContractorProfileEndpoints:
    @pytest.mark.asyncio
    async def test_get_and_save_profile(self, client, seeded):
        headers = as_user(seeded["contractor"])

        current = await client.get(f"{API}/contractors/me/profile", headers=headers)
        saved = await client.put(
            f"{API}/contractors/me/profile",
            headers=headers,
            json={"skills": ["plumbing", "hvac"], "preferred_job_types": ["hard"]},
        )

        assert current.json()["business_name"] == "Bob's Plumbing"
        assert saved.status_code == 200
        assert saved.json()["skills"] == ["plumbing", "hvac"]
        assert saved.json()["preferred_job_types"] == ["HARD"]


class TestVoiceWebhook:
    """End-of-call reports from the voice provider."""

    def payload(self, job_id, phone="+15559870000", accepted=True, **data):
        return {
            "type": "call-end",
            "call": {
                "id": "call-1",
                "customer": {"number": phone},
                "analysis": {
                    "structuredData": {
                        "jobAccepted": accepted,
                        "enrichedIssueId": str(job_id) if job_id else None,
                        **data,
                    }
                },
            },
        }

    @pytest.mark.asyncio
    async def test_status(self, client):
        response = await client.get(f"{API}/webhooks/voice/job-response")

        assert response.json() == {
            "message": "Contractor job response webhook endpoint is active"
        }

    @pytest.mark.asyncio
    async def test_other_events_are_acknowledged(self, client):
        response = await client.post(
            f"{API}/webhooks/voice/job-response", json={"type": "status-update"}
        )

        assert response.json() == {"received": True}

    @pytest.mark.asyncio
    async def test_acceptance_claims_job(self, client, seeded, db_session):
        # Arrange
        job = seeded["job"]
        await OfferCallRepository(db_session).create_many(
            [OfferCall(job.id, seeded["contractor"].id, "+15559870000", 1, 81)]
        )
        await db_session.commit()

        # Act
        response = await client.post(
            f"{API}/webhooks/voice/job-response",
            json=self.payload(job.id, contractorResponse="accepted"),
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["contractor_id"] == str(seeded["contractor"].id)
        assert body["appointment_id"] is not None
        offers = await OfferCallRepository(db_session).list_for_job(job.id)
        assert offers[0].outcome.value == "ACCEPTED"

    @pytest.mark.asyncio
    async def test_decline(self, client, seeded):
        response = await client.post(
            f"{API}/webhooks/voice/job-response",
            json=self.payload(
                seeded["job"].id,
                accepted=False,
                contractorResponse="declined",
                reasonForDecline="Too far",
            ),
        )

        assert response.status_code == 200
        assert response.json()["contractor_response"] == "declined"

    @pytest.mark.asyncio
    async def test_missing_job_id(self, client, seeded):
        response = await client.post(
            f"{API}/webhooks/voice/job-response", json=self.payload(None)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Missing job ID"

    @pytest.mark.asyncio
    async def test_invalid_job_id(self, client, seeded):
        response = await client.post(
            f"{API}/webhooks/voice/job-response", json=self.payload("not-a-uuid")
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid job ID"

    @pytest.mark.asyncio
    async def test_unknown_contractor(self, client, seeded):
        response = await client.post(
            f"{API}/webhooks/voice/job-response",
            json=self.payload(seeded["job"].id, phone="+19990000000"),
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Contractor not found"
