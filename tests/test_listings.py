"""
Listing service and urgency tests.

Urgency tests use plain mock listings; service tests run on SQLite.
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from sqlalchemy.orm import Session

from test_fixtures import db_session, create_community, create_listing, create_user
from app.clock import utcnow
from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.enums import ListingStatus, ModerationDecision, UrgencyLevel
from domain.schemas.listing_schemas import FoodListingCreate, FoodListingUpdate
from domain.schemas.receipt_schemas import ClaimCreate
from services import urgency_service
from services.listing_service import ListingService
from services.receipt_service import ReceiptService

NOW = datetime(2026, 3, 5, 12, 0, 0)


def listing_due_in(**delta):
    return SimpleNamespace(pickup_by=NOW + timedelta(**delta), expiry_date=None)


# =============================================================================
# URGENCY
# =============================================================================


@pytest.mark.parametrize(
    "delta, level",
    [
        (dict(hours=2), UrgencyLevel.CRITICAL),
        (dict(hours=6), UrgencyLevel.CRITICAL),
        (dict(hours=7), UrgencyLevel.HIGH),
        (dict(hours=24), UrgencyLevel.HIGH),
        (dict(hours=48), UrgencyLevel.MEDIUM),
        (dict(hours=73), UrgencyLevel.NORMAL),
        (dict(minutes=-1), UrgencyLevel.NONE),
    ],
)
def test_urgency_levels(delta, level):
    assert urgency_service.calculate_level(listing_due_in(**delta), NOW) == level


def test_deadline_falls_back_to_end_of_expiry_day():
    listing = SimpleNamespace(pickup_by=None, expiry_date=date(2026, 3, 5))
    assert urgency_service.get_deadline(listing) == datetime(2026, 3, 5, 23, 59, 59)
    assert urgency_service.calculate_level(listing, NOW) == UrgencyLevel.HIGH


def test_pickup_by_takes_precedence_over_expiry():
    listing = SimpleNamespace(pickup_by=NOW + timedelta(hours=1), expiry_date=date(2026, 3, 20))
    assert urgency_service.get_deadline(listing) == NOW + timedelta(hours=1)


@pytest.mark.parametrize(
    "seconds, text",
    [
        (2 * 86400 + 3 * 3600, "2d 3h remaining"),
        (86400, "1 day remaining"),
        (5 * 3600 + 10 * 60, "5h 10m remaining"),
        (3 * 3600, "3 hours remaining"),
        (12 * 60, "12 minutes remaining"),
        (60, "1 minute remaining"),
        (0, "Expired"),
    ],
)
def test_format_countdown(seconds, text):
    assert urgency_service.format_countdown(seconds) == text


def test_urgency_info_without_deadline():
    info = urgency_service.get_urgency_info(
        SimpleNamespace(pickup_by=None, expiry_date=None), NOW
    )
    assert info.level == UrgencyLevel.NONE
    assert info.countdown == "No deadline"
    assert info.is_expired is False
    assert info.is_urgent is False


def test_urgency_info_expired():
    info = urgency_service.get_urgency_info(listing_due_in(hours=-3), NOW)
    assert info.is_expired is True
    assert info.seconds_remaining == 0
    assert info.countdown == "Expired"


def test_sort_by_urgency_puts_no_deadline_last():
    no_deadline = SimpleNamespace(pickup_by=None, expiry_date=None, title="rice")
    later = SimpleNamespace(pickup_by=NOW + timedelta(hours=5), expiry_date=None, title="milk")
    sooner = SimpleNamespace(pickup_by=NOW + timedelta(hours=1), expiry_date=None, title="salad")
    relaxed = SimpleNamespace(pickup_by=NOW + timedelta(days=6), expiry_date=None, title="cans")

    ordered = urgency_service.sort_by_urgency([no_deadline, relaxed, later, sooner], NOW)

    assert [l.title for l in ordered] == ["salad", "milk", "cans", "rice"]


def test_filter_expired_and_urgent():
    expired = listing_due_in(hours=-1)
    urgent = listing_due_in(hours=3)
    relaxed = listing_due_in(days=5)

    assert urgency_service.filter_expired([expired, urgent, relaxed], NOW) == [urgent, relaxed]
    assert urgency_service.get_urgent_listings([expired, urgent, relaxed], NOW) == [urgent]


# =============================================================================
# LISTING SERVICE
# =============================================================================


def new_listing(**overrides):
    values = dict(
        title="Greek yogurt",
        quantity=Decimal("6"),
        unit="cups",
        category="Dairy",
        expiry_date=date.today() + timedelta(days=4),
    )
    values.update(overrides)
    return FoodListingCreate(**values)


def test_create_listing_waits_for_moderation(db_session: Session):
    donor = create_user(db_session, "donor")

    listing = ListingService.create_listing(db_session, donor, new_listing())

    assert listing.status == ListingStatus.PENDING
    assert listing.category == "dairy"
    assert listing.donor_name == donor.full_name


def test_create_listing_without_moderation(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "listing_moderation_enabled", False)
    donor = create_user(db_session, "donor")

    listing = ListingService.create_listing(db_session, donor, new_listing())

    assert listing.status == ListingStatus.AVAILABLE


def test_expiry_required_except_produce(db_session: Session):
    donor = create_user(db_session, "donor")

    with pytest.raises(ServiceValidationError):
        ListingService.create_listing(db_session, donor, new_listing(expiry_date=None))

    produce = ListingService.create_listing(
        db_session, donor, new_listing(category="produce", expiry_date=None)
    )
    assert produce.expiry_date is None


def test_create_listing_in_inactive_community(db_session: Session):
    donor = create_user(db_session, "donor")
    closed = create_community(db_session, is_active=False)

    with pytest.raises(ServiceValidationError):
        ListingService.create_listing(
            db_session, donor, new_listing(community_id=closed.community_id)
        )


def test_moderation_only_from_pending(db_session: Session):
    donor = create_user(db_session, "donor")
    admin = create_user(db_session, "admin")
    listing = ListingService.create_listing(db_session, donor, new_listing())

    approved = ListingService.moderate_listing(
        db_session, admin, listing.listing_id, ModerationDecision.APPROVE
    )
    assert approved.status == ListingStatus.APPROVED

    with pytest.raises(ConflictError):
        ListingService.moderate_listing(
            db_session, admin, listing.listing_id, ModerationDecision.DECLINE
        )


def test_list_defaults_to_claimable(db_session: Session):
    donor = create_user(db_session, "donor")
    create_listing(db_session, donor, title="available")
    create_listing(db_session, donor, title="approved", status=ListingStatus.APPROVED)
    create_listing(db_session, donor, title="pending", status=ListingStatus.PENDING)
    create_listing(db_session, donor, title="claimed", status=ListingStatus.CLAIMED)

    titles = {l.title for l in ListingService.list_listings(db_session)}
    assert titles == {"available", "approved"}

    pending = ListingService.list_listings(db_session, status=ListingStatus.PENDING)
    assert [l.title for l in pending] == ["pending"]

    mine = ListingService.list_listings(db_session, user_id=donor.user_id)
    assert len(mine) == 4


def test_list_sorted_by_urgency_without_expired(db_session: Session):
    donor = create_user(db_session, "donor")
    now = utcnow()
    create_listing(db_session, donor, title="relaxed", expiry_date=date.today() + timedelta(days=9))
    create_listing(db_session, donor, title="urgent", pickup_by=now + timedelta(hours=2))
    create_listing(db_session, donor, title="gone", pickup_by=now - timedelta(hours=2))

    listings = ListingService.list_listings(db_session, sort="urgency", include_expired=False)

    assert [l.title for l in listings] == ["urgent", "relaxed"]


def test_update_listing_owner_only(db_session: Session):
    donor = create_user(db_session, "donor")
    stranger = create_user(db_session)
    listing = create_listing(db_session, donor)

    with pytest.raises(ForbiddenError):
        ListingService.update_listing(
            db_session, stranger, listing.listing_id, FoodListingUpdate(title="Mine now")
        )

    updated = ListingService.update_listing(
        db_session, donor, listing.listing_id, FoodListingUpdate(title="Gala apples")
    )
    assert updated.title == "Gala apples"


def test_claimed_listing_is_locked(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    listing = create_listing(db_session, donor)
    ReceiptService.create_claim(db_session, claimer, ClaimCreate(food_id=listing.listing_id))

    with pytest.raises(ConflictError):
        ListingService.update_listing(
            db_session, donor, listing.listing_id, FoodListingUpdate(quantity=Decimal("2"))
        )
    with pytest.raises(ConflictError):
        ListingService.delete_listing(db_session, donor, listing.listing_id)


def test_delete_listing(db_session: Session):
    donor = create_user(db_session, "donor")
    listing = create_listing(db_session, donor)

    assert ListingService.delete_listing(db_session, donor, listing.listing_id) is True
    with pytest.raises(NotFoundError):
        ListingService.get_listing(db_session, listing.listing_id)
