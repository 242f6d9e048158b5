"""
Scheduled job tests: receipt expiry and pickup reminders, both through
JobService and through the service-role protected /functions endpoints.
"""

import pytest
from datetime import date, datetime, time, timedelta
from sqlalchemy.orm import Session

from test_fixtures import (
    SERVICE_HEADERS,
    client,
    db_session,
    create_listing,
    create_user,
    thursday_noon,
)
from adapters import sms_adapter
from app.exceptions import ExternalServiceError
from domain.models import FoodClaim, Notification, SmsLog
from domain.schemas.receipt_schemas import ClaimCreate
from services.job_service import (
    JobService,
    format_pickup_date,
    format_pickup_time,
)
from services.receipt_service import ReceiptService

FRIDAY = date(2026, 3, 6)


def claim_for_friday(db, claimer, listing, pickup_time=time(15, 30), reminder_hours=None):
    data = ClaimCreate(
        food_id=listing.listing_id,
        pickup_date=FRIDAY,
        pickup_time=pickup_time,
        pickup_place="Lincoln High Closet",
        reminder_hours_before=reminder_hours,
    )
    food_claim, _ = ReceiptService.create_claim(db, claimer, data, now=thursday_noon())
    return food_claim


# =============================================================================
# FORMATTING
# =============================================================================


def test_format_pickup_date_and_time():
    assert format_pickup_date(FRIDAY) == "Friday, March 6, 2026"
    assert format_pickup_time(time(15, 30)) == "3:30 PM"
    assert format_pickup_time(time(0, 5)) == "12:05 AM"
    assert format_pickup_time(time(12, 0)) == "12:00 PM"
    assert format_pickup_time(None) == "TBD"


# =============================================================================
# EXPIRY JOB
# =============================================================================


def test_run_expire_receipts_summary(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    ReceiptService.create_claim(
        db_session,
        claimer,
        ClaimCreate(food_id=create_listing(db_session, donor).listing_id),
        now=thursday_noon(),
    )

    now = datetime(2026, 3, 7, 9, 0)
    result = JobService.run_expire_receipts(db_session, now=now)

    assert result == {
        "success": True,
        "expired_count": 1,
        "message": "Successfully expired 1 receipt(s)",
        "timestamp": now,
    }


# =============================================================================
# REMINDER JOB
# =============================================================================


def test_reminder_created_inside_window(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    food_claim = claim_for_friday(db_session, claimer, create_listing(db_session, donor))

    result = JobService.process_pickup_reminders(db_session, now=datetime(2026, 3, 6, 9, 0))

    assert result["success"] is True
    assert result["processed"] == 1
    assert result["results"] == {"reminders_created": 1, "errors": []}

    notification = db_session.query(Notification).filter_by(user_id=claimer.user_id).one()
    assert notification.type == "pickup_reminder"
    assert notification.title == "Pickup Reminder"
    assert notification.message == (
        "Don't forget! Your food pickup is scheduled for Friday, March 6, 2026 "
        "at 3:30 PM at Lincoln High Closet."
    )
    assert notification.data["claim_id"] == str(food_claim.claim_id)
    assert db_session.get(FoodClaim, food_claim.claim_id).reminder_sent is True


def test_reminder_sent_only_once(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    claim_for_friday(db_session, claimer, create_listing(db_session, donor))

    now = datetime(2026, 3, 6, 9, 0)
    JobService.process_pickup_reminders(db_session, now=now)
    again = JobService.process_pickup_reminders(db_session, now=now + timedelta(minutes=30))

    assert again["processed"] == 0
    assert db_session.query(Notification).count() == 1


@pytest.mark.parametrize(
    "now",
    [
        datetime(2026, 3, 5, 15, 0),  # window opens at 15:30 the day before
        datetime(2026, 3, 6, 15, 30),  # pickup time reached
    ],
)
def test_no_reminder_outside_window(db_session: Session, now):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    claim_for_friday(db_session, claimer, create_listing(db_session, donor))

    result = JobService.process_pickup_reminders(db_session, now=now)
    assert result["processed"] == 0


def test_reminder_uses_noon_when_time_unset(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    claim_for_friday(
        db_session, claimer, create_listing(db_session, donor), pickup_time=None, reminder_hours=2
    )

    assert JobService.process_pickup_reminders(db_session, datetime(2026, 3, 6, 9, 59))["processed"] == 0
    result = JobService.process_pickup_reminders(db_session, datetime(2026, 3, 6, 10, 0))
    assert result["processed"] == 1
    notification = db_session.query(Notification).one()
    assert "at TBD" in notification.message


def test_reminder_texts_opted_in_claimer(db_session: Session, monkeypatch):
    donor = create_user(db_session, "donor")
    claimer = create_user(
        db_session, phone="+15551234567", sms_opt_in=True, sms_notifications_enabled=True
    )
    claim_for_friday(db_session, claimer, create_listing(db_session, donor))

    sent = []

    def fake_send(to, body):
        sent.append((to, body))
        return {"sid": "SM123", "status": "queued"}

    monkeypatch.setattr(sms_adapter, "send_message", fake_send)

    result = JobService.process_pickup_reminders(db_session, now=datetime(2026, 3, 6, 9, 0))

    assert result["results"]["errors"] == []
    assert len(sent) == 1
    assert sent[0][0] == "+15551234567"
    assert "Fresh apples" in sent[0][1]
    log = db_session.query(SmsLog).one()
    assert (log.status, log.type, log.twilio_sid) == ("sent", "reminder", "SM123")


def test_sms_failure_keeps_notification(db_session: Session, monkeypatch):
    donor = create_user(db_session, "donor")
    claimer = create_user(
        db_session, phone="+15551234567", sms_opt_in=True, sms_notifications_enabled=True
    )
    food_claim = claim_for_friday(db_session, claimer, create_listing(db_session, donor))

    def failing_send(to, body):
        raise ExternalServiceError("Twilio API error: unreachable")

    monkeypatch.setattr(sms_adapter, "send_message", failing_send)

    result = JobService.process_pickup_reminders(db_session, now=datetime(2026, 3, 6, 9, 0))

    assert result["results"]["reminders_created"] == 1
    assert len(result["results"]["errors"]) == 1
    assert str(food_claim.claim_id) in result["results"]["errors"][0]
    assert db_session.query(Notification).count() == 1
    assert db_session.query(SmsLog).one().status == "failed"


# =============================================================================
# /functions ENDPOINTS
# =============================================================================


def test_functions_require_service_role():
    assert client.post("/functions/expire-receipts").status_code == 401
    r = client.post(
        "/functions/expire-receipts", headers={"Authorization": "Bearer wrong-key"}
    )
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"


def test_expire_receipts_endpoint(monkeypatch):
    now = datetime(2026, 3, 7, 9, 0)
    monkeypatch.setattr(
        JobService,
        "run_expire_receipts",
        lambda db: {
            "success": True,
            "expired_count": 3,
            "message": "Successfully expired 3 receipt(s)",
            "timestamp": now,
        },
    )

    r = client.post("/functions/expire-receipts", headers=SERVICE_HEADERS)

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["expired_count"] == 3


def test_expire_receipts_endpoint_failure(monkeypatch):
    def boom(db):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(JobService, "run_expire_receipts", boom)

    r = client.post("/functions/expire-receipts", headers=SERVICE_HEADERS)

    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "database unavailable"
    assert "timestamp" in body


def test_process_pickup_reminders_endpoint(monkeypatch):
    monkeypatch.setattr(
        JobService,
        "process_pickup_reminders",
        lambda db: {
            "success": True,
            "processed": 2,
            "results": {"reminders_created": 2, "errors": []},
            "timestamp": datetime(2026, 3, 6, 9, 0),
        },
    )

    r = client.post("/functions/process-pickup-reminders", headers=SERVICE_HEADERS)

    assert r.status_code == 200
    assert r.json()["results"]["reminders_created"] == 2
