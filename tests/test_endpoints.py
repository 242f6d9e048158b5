import uuid
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from test_fixtures import (
    act_as,
    client,
    create_code,
    create_community,
    create_user,
    db_session,
    make_listing,
    make_user,
)
from app.clock import utcnow
from app.config import settings
from app.exceptions import ConflictError, NotFoundError
from domain.enums import ListingStatus, ReceiptStatus
from services.approval_code_service import ApprovalCodeService
from services.listing_service import ListingService
from services.notification_service import NotificationService
from services.user_service import UserService


def test_health_check():
    r = client.get("/health-check")
    assert r.status_code == 200
    body = r.json()
    assert body["service"] == "DoGoods"
    assert body["status"] == "ok"
    assert body["database"] == "ok"


# =============================================================================
# USERS
# =============================================================================


def test_signup_returns_201(monkeypatch):
    user = make_user(approval_number="LIN100001")
    captured = {}

    def fake_signup(db, payload):
        captured["payload"] = payload
        return user

    monkeypatch.setattr(UserService, "signup", staticmethod(fake_signup))

    r = client.post(
        "/users/signup",
        json={
            "email": "James.Carter@Example.com",
            "full_name": "James Carter",
            "approval_number": " lin100001 ",
        },
    )

    assert r.status_code == 201
    assert r.json()["user_id"] == str(user.user_id)
    assert captured["payload"].email == "james.carter@example.com"
    assert captured["payload"].approval_number == "LIN100001"


def test_signup_rejects_bad_email():
    r = client.post(
        "/users/signup",
        json={"email": "not-an-email", "full_name": "James", "approval_number": "LIN100001"},
    )
    assert r.status_code == 422


def test_get_me(act_as):
    user = act_as(make_user())
    r = client.get("/users/me")
    assert r.status_code == 200
    assert r.json()["email"] == user.email


def test_admin_routes_forbid_regular_users(act_as):
    act_as(make_user())
    for method, path in [
        ("get", "/users"),
        ("get", "/approval-codes/stats"),
        ("get", "/feedback"),
        ("post", "/receipts/expire"),
    ]:
        r = getattr(client, method)(path)
        assert r.status_code == 403, path
        assert r.json()["error"]["code"] == "FORBIDDEN"


# =============================================================================
# LISTINGS
# =============================================================================


def test_list_listings_attaches_urgency(monkeypatch):
    soon = make_listing(pickup_by=utcnow() + timedelta(hours=3))
    later = make_listing(title="Rice bags")
    captured = {}

    def fake_list(db, **filters):
        captured.update(filters)
        return [soon, later]

    monkeypatch.setattr(ListingService, "list_listings", staticmethod(fake_list))

    r = client.get("/listings", params={"sort": "urgency", "category": "pantry"})

    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert body["listings"][0]["urgency"]["level"] == "critical"
    assert body["listings"][0]["urgency"]["is_urgent"] is True
    assert body["listings"][1]["urgency"]["level"] == "normal"
    assert captured["sort"] == "urgency"
    assert captured["category"] == "pantry"
    assert captured["include_expired"] is False


def test_list_listings_rejects_unknown_sort():
    r = client.get("/listings", params={"sort": "alphabetical"})
    assert r.status_code == 422


def test_get_listing_not_found(monkeypatch):
    def missing(db, listing_id):
        raise NotFoundError(f"Listing {listing_id} not found")

    monkeypatch.setattr(ListingService, "get_listing", staticmethod(missing))

    r = client.get(f"/listings/{uuid.uuid4()}")

    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


def test_delete_claimed_listing_conflicts(monkeypatch, act_as):
    act_as(make_user())

    def locked(db, user, listing_id):
        raise ConflictError("Claimed listings cannot be changed")

    monkeypatch.setattr(ListingService, "delete_listing", staticmethod(locked))

    r = client.delete(f"/listings/{uuid.uuid4()}")

    assert r.status_code == 409
    assert r.json()["success"] is False


def test_moderate_listing(monkeypatch, act_as):
    act_as(make_user(is_admin=True, profile_type="admin"))
    listing = make_listing(status=ListingStatus.AVAILABLE)
    monkeypatch.setattr(
        ListingService, "moderate_listing", staticmethod(lambda db, admin, lid, decision: listing)
    )

    r = client.post(f"/listings/{listing.listing_id}/moderate", json={"decision": "approve"})

    assert r.status_code == 200
    assert r.json()["status"] == "available"


# =============================================================================
# CLAIM TO PICKUP, END TO END
# =============================================================================


def test_claim_and_pickup_flow(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "listing_moderation_enabled", False)
    community = create_community(db_session, name="Lincoln High Closet")
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    donor_headers = {"X-User-Id": str(donor.user_id)}
    claimer_headers = {"X-User-Id": str(claimer.user_id)}

    r = client.post(
        "/listings",
        json={
            "title": "Sourdough loaves",
            "quantity": "6",
            "unit": "loaves",
            "category": "bakery",
            "expiry_date": (utcnow() + timedelta(days=3)).date().isoformat(),
            "community_id": str(community.community_id),
        },
        headers=donor_headers,
    )
    assert r.status_code == 201
    listing = r.json()
    assert listing["status"] == "available"
    assert listing["donor_name"] == "Maria Lopez"

    r = client.post("/claims", json={"food_id": listing["listing_id"]}, headers=claimer_headers)
    assert r.status_code == 201
    receipt = r.json()["receipt"]
    assert receipt["status"] == "pending"
    assert receipt["pickup_location"] == "Lincoln High Closet"
    assert [i["title"] for i in receipt["items"]] == ["Sourdough loaves"]
    assert Decimal(receipt["items"][0]["quantity"]) == Decimal("6")

    r = client.post("/claims", json={"food_id": listing["listing_id"]}, headers=claimer_headers)
    assert r.status_code == 409

    r = client.get("/receipts/active", headers=claimer_headers)
    assert [x["receipt_id"] for x in r.json()] == [receipt["receipt_id"]]

    r = client.get(f"/receipts/{receipt['receipt_id']}", headers=donor_headers)
    assert r.status_code == 403

    r = client.post(f"/receipts/{receipt['receipt_id']}/pickup", headers=claimer_headers)
    assert r.status_code == 200
    assert r.json()["status"] == ReceiptStatus.COMPLETED.value
    assert r.json()["picked_up_at"] is not None

    r = client.get(f"/listings/{listing['listing_id']}")
    assert r.json()["status"] == "completed"


def test_signup_with_approval_code(db_session: Session):
    community = create_community(db_session)
    create_code(db_session, community, "LIN100001")

    r = client.post(
        "/users/signup",
        json={
            "email": "new.family@example.com",
            "full_name": "Dana Brooks",
            "approval_number": "lin100001",
            "phone": "555 123 4567",
        },
    )

    assert r.status_code == 201
    body = r.json()
    assert body["community_id"] == str(community.community_id)
    assert body["phone"] == "+15551234567"

    r = client.post(
        "/users/signup",
        json={
            "email": "second.family@example.com",
            "full_name": "Lee Park",
            "approval_number": "LIN100001",
        },
    )
    assert r.status_code == 409


# =============================================================================
# ADMIN, NOTIFICATIONS
# =============================================================================


def test_export_codes_csv(monkeypatch, act_as):
    act_as(make_user(is_admin=True, profile_type="admin"))
    monkeypatch.setattr(
        ApprovalCodeService,
        "export_unclaimed_csv",
        staticmethod(lambda db: "Code,School Code,Community,Created At\r\nLIN100001,LIN,Lincoln,\r\n"),
    )

    r = client.get("/approval-codes/export")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    assert "LIN100001" in r.text


def test_mark_all_notifications_read(monkeypatch, act_as):
    user = act_as(make_user())
    captured = {}

    def fake_mark_all(db, user_id):
        captured["user_id"] = user_id
        return 3

    monkeypatch.setattr(NotificationService, "mark_all_read", staticmethod(fake_mark_all))

    r = client.post("/notifications/read-all")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "updated": 3}
    assert captured["user_id"] == user.user_id


def test_anonymous_feedback_endpoint(db_session: Session):
    r = client.post(
        "/feedback",
        json={"feedback_type": "feature", "subject": "Dark mode", "message": "Please add it"},
    )

    assert r.status_code == 201
    assert r.json()["user_id"] is None
    assert r.json()["status"] == "new"
