"""
Signup with approval codes, settings and admin role management.
"""

import pytest
import uuid
from sqlalchemy.orm import Session

from test_fixtures import db_session, create_code, create_community, create_user, unique_email
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    ServiceValidationError,
    UnauthorizedError,
)
from domain.models import ApprovalCode
from domain.schemas.user_schemas import SignupRequest, UserSettingsUpdate
from services.user_service import UserService


def signup_request(code="LIN100001", email=None, **overrides):
    values = dict(
        email=email or unique_email("ana.ruiz"),
        full_name="Ana Ruiz",
        approval_number=code,
    )
    values.update(overrides)
    return SignupRequest(**values)


def test_signup_redeems_code(db_session: Session):
    community = create_community(db_session)
    create_code(db_session, community, "LIN100001")

    user = UserService.signup(db_session, signup_request(code="lin100001", phone="555-123-4567"))

    assert user.community_id == community.community_id
    assert user.approval_number == "LIN100001"
    assert user.phone == "+15551234567"
    assert user.is_admin is False

    code = db_session.get(ApprovalCode, "LIN100001")
    assert code.is_claimed is True
    assert code.claimed_by == user.user_id
    assert code.claimed_at is not None


@pytest.mark.parametrize("bad_code", ["LI100001", "LIN12345", "1234567890", "LIN1000011"])
def test_signup_rejects_malformed_code(db_session: Session, bad_code):
    with pytest.raises(ServiceValidationError):
        UserService.signup(db_session, signup_request(code=bad_code))


def test_signup_rejects_unknown_code(db_session: Session):
    create_code(db_session, create_community(db_session), "LIN100001")

    with pytest.raises(ServiceValidationError):
        UserService.signup(db_session, signup_request(code="LIN100002"))


def test_code_can_only_be_used_once(db_session: Session):
    create_code(db_session, create_community(db_session), "LIN100001")
    UserService.signup(db_session, signup_request())

    with pytest.raises(ConflictError):
        UserService.signup(db_session, signup_request())


def test_duplicate_email_leaves_code_unclaimed(db_session: Session):
    community = create_community(db_session)
    create_code(db_session, community, "LIN100001")
    create_code(db_session, community, "LIN100002")
    email = unique_email("dup")
    UserService.signup(db_session, signup_request(code="LIN100001", email=email))

    with pytest.raises(ConflictError):
        UserService.signup(db_session, signup_request(code="LIN100002", email=email))
    assert db_session.get(ApprovalCode, "LIN100002").is_claimed is False


def test_authenticate_unknown_user(db_session: Session):
    with pytest.raises(UnauthorizedError):
        UserService.authenticate(db_session, uuid.uuid4())


def test_update_settings_normalizes_phone(db_session: Session):
    user = create_user(db_session)

    updated = UserService.update_settings(
        db_session,
        user,
        UserSettingsUpdate(phone="(555) 987-6543", sms_opt_in=True, default_reminder_hours=6),
    )

    assert updated.phone == "+15559876543"
    assert updated.sms_opt_in is True
    assert updated.default_reminder_hours == 6


def test_update_settings_rejects_bad_phone(db_session: Session):
    user = create_user(db_session)
    with pytest.raises(ServiceValidationError):
        UserService.update_settings(db_session, user, UserSettingsUpdate(phone="0"))


def test_set_admin(db_session: Session):
    admin = create_user(db_session, "admin")
    user = create_user(db_session)

    promoted = UserService.set_admin(db_session, admin, user.user_id, True)
    assert promoted.is_admin is True

    with pytest.raises(ForbiddenError):
        UserService.set_admin(db_session, admin, admin.user_id, False)
