"""
Before/after pickup verification, disputes, photo storage and audit logs.
"""

import pytest
import uuid
from datetime import datetime
from sqlalchemy.orm import Session

from test_fixtures import db_session, create_listing, create_user
from adapters import storage_adapter
from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, ServiceValidationError
from domain.enums import (
    DisputeStatus,
    DisputeType,
    ListingStatus,
    VerificationStatus,
    VerificationType,
)
from domain.schemas.verification_schemas import DisputeCreate
from services.verification_service import VerificationService


@pytest.fixture
def claimed_listing(db_session: Session):
    donor = create_user(db_session, "donor")
    claimer = create_user(db_session)
    listing = create_listing(
        db_session, donor, status=ListingStatus.CLAIMED, claimed_by=claimer.user_id
    )
    return donor, claimer, listing


def test_before_then_after_completes(db_session: Session, claimed_listing):
    donor, claimer, listing = claimed_listing

    before = VerificationService.verify_before_pickup(
        db_session, donor, listing.listing_id, ["http://cdn/before.jpg"], "Sealed box"
    )
    assert before.verification_status == VerificationStatus.VERIFIED_BEFORE
    assert before.verified_before_by == donor.user_id
    assert before.verification_before_photos == ["http://cdn/before.jpg"]

    after = VerificationService.verify_after_pickup(
        db_session, claimer, listing.listing_id, ["http://cdn/after.jpg"], None
    )
    assert after.verification_status == VerificationStatus.COMPLETED
    assert after.verified_after_pickup is True

    actions = [l.action for l in VerificationService.get_logs(db_session, listing.listing_id)]
    assert actions == ["verified_after_pickup", "verified_before_pickup"]


def test_after_first_then_before_completes(db_session: Session, claimed_listing):
    donor, claimer, listing = claimed_listing

    after = VerificationService.verify_after_pickup(db_session, claimer, listing.listing_id, [], None)
    assert after.verification_status == VerificationStatus.VERIFIED_AFTER

    before = VerificationService.verify_before_pickup(db_session, donor, listing.listing_id, [], None)
    assert before.verification_status == VerificationStatus.COMPLETED


def test_roles_are_enforced(db_session: Session, claimed_listing):
    donor, claimer, listing = claimed_listing

    with pytest.raises(ForbiddenError):
        VerificationService.verify_before_pickup(db_session, claimer, listing.listing_id, [], None)
    with pytest.raises(ForbiddenError):
        VerificationService.verify_after_pickup(db_session, donor, listing.listing_id, [], None)
    with pytest.raises(ForbiddenError):
        VerificationService.skip_verification(db_session, claimer, listing.listing_id)


def test_double_verification_conflicts(db_session: Session, claimed_listing):
    donor, _, listing = claimed_listing
    VerificationService.verify_before_pickup(db_session, donor, listing.listing_id, [], None)

    with pytest.raises(ConflictError):
        VerificationService.verify_before_pickup(db_session, donor, listing.listing_id, [], None)


def test_skip_verification(db_session: Session, claimed_listing):
    donor, claimer, listing = claimed_listing

    skipped = VerificationService.skip_verification(db_session, donor, listing.listing_id)

    assert skipped.verification_status == VerificationStatus.SKIPPED
    assert skipped.verification_required is False
    with pytest.raises(ConflictError):
        VerificationService.verify_after_pickup(db_session, claimer, listing.listing_id, [], None)


def test_dispute_flow(db_session: Session, claimed_listing):
    donor, claimer, listing = claimed_listing
    admin = create_user(db_session, "admin")

    dispute = VerificationService.report_dispute(
        db_session,
        claimer,
        listing.listing_id,
        DisputeCreate(
            dispute_type=DisputeType.QUANTITY_MISMATCH,
            description="Only half the apples were there",
        ),
    )
    assert dispute.status == DisputeStatus.OPEN
    assert listing.verification_status == VerificationStatus.DISPUTED

    with pytest.raises(ConflictError):
        VerificationService.verify_before_pickup(db_session, donor, listing.listing_id, [], None)

    assert VerificationService.list_disputes(db_session, status=DisputeStatus.OPEN) == [dispute]

    resolved = VerificationService.resolve_dispute(
        db_session, admin, dispute.dispute_id, DisputeStatus.RESOLVED, "Donor refunded"
    )
    assert resolved.status == DisputeStatus.RESOLVED
    assert resolved.resolved_by == admin.user_id
    assert resolved.resolved_at is not None

    with pytest.raises(ConflictError):
        VerificationService.resolve_dispute(
            db_session, admin, dispute.dispute_id, DisputeStatus.DISMISSED
        )

    actions = [l.action for l in VerificationService.get_logs(db_session, listing.listing_id)]
    assert actions == ["dispute_resolved", "dispute_reported"]


def test_dispute_cannot_be_reopened_by_resolve(db_session: Session, claimed_listing):
    _, claimer, listing = claimed_listing
    admin = create_user(db_session, "admin")
    dispute = VerificationService.report_dispute(
        db_session,
        claimer,
        listing.listing_id,
        DisputeCreate(dispute_type=DisputeType.OTHER, description="Wrong address"),
    )

    with pytest.raises(ServiceValidationError):
        VerificationService.resolve_dispute(
            db_session, admin, dispute.dispute_id, DisputeStatus.OPEN
        )


def test_outsider_cannot_dispute(db_session: Session, claimed_listing):
    _, _, listing = claimed_listing
    outsider = create_user(db_session, email="outsider@example.com")

    with pytest.raises(ForbiddenError):
        VerificationService.report_dispute(
            db_session,
            outsider,
            listing.listing_id,
            DisputeCreate(dispute_type=DisputeType.OTHER, description="Looks wrong"),
        )


def test_verification_stats(db_session: Session, claimed_listing):
    donor, _, listing = claimed_listing
    create_listing(db_session, donor, title="Sourdough loaves")
    VerificationService.skip_verification(db_session, donor, listing.listing_id)

    stats = VerificationService.verification_stats(db_session)

    assert stats["total"] == 2
    assert stats["by_status"]["skipped"] == 1
    assert stats["by_status"]["pending"] == 1
    assert stats["by_status"]["completed"] == 0

    skipped = VerificationService.list_listings(db_session, VerificationStatus.SKIPPED)
    assert [l.listing_id for l in skipped] == [listing.listing_id]


# =============================================================================
# PHOTOS
# =============================================================================


def test_photo_path():
    listing_id = uuid.UUID("8d2b3c1e-5f4a-4e7b-9c1d-2a3b4c5d6e7f")
    path = VerificationService.photo_path(
        listing_id, VerificationType.BEFORE, "jpg", datetime(2026, 3, 5, 12, 0)
    )
    assert path == f"verification/{listing_id}/{listing_id}_before_1772712000000.jpg"


def test_upload_photo_stores_file(db_session: Session, claimed_listing, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_dir", tmp_path)
    monkeypatch.setattr(settings, "storage_public_url", "http://localhost:8000/storage")
    donor, _, listing = claimed_listing

    path, url = VerificationService.upload_photo(
        db_session, donor, listing.listing_id, VerificationType.BEFORE, "crate.PNG", b"\x89PNG"
    )

    assert path.startswith(f"verification/{listing.listing_id}/")
    assert path.endswith(".png")
    assert url == f"http://localhost:8000/storage/{path}"
    assert (tmp_path / path).read_bytes() == b"\x89PNG"


def test_upload_photo_stamps_utc_time(db_session: Session, claimed_listing, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_dir", tmp_path)
    donor, _, listing = claimed_listing

    path, _ = VerificationService.upload_photo(
        db_session,
        donor,
        listing.listing_id,
        VerificationType.AFTER,
        "shelf.jpg",
        b"\xff\xd8",
        now=datetime(2026, 3, 5, 12, 0),
    )

    assert path.endswith("_after_1772712000000.jpg")


def test_upload_photo_rejects_type_and_size(db_session: Session, claimed_listing, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_dir", tmp_path)
    monkeypatch.setattr(settings, "max_upload_bytes", 4)
    donor, _, listing = claimed_listing

    with pytest.raises(ServiceValidationError):
        VerificationService.upload_photo(
            db_session, donor, listing.listing_id, VerificationType.BEFORE, "notes.pdf", b"%PDF"
        )
    with pytest.raises(ServiceValidationError):
        VerificationService.upload_photo(
            db_session, donor, listing.listing_id, VerificationType.BEFORE, "big.jpg", b"12345"
        )


def test_storage_rejects_path_escape(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_dir", tmp_path)
    with pytest.raises(ServiceValidationError):
        storage_adapter.save_file("../outside.jpg", b"data")
