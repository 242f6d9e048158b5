"""
Approval code generation, statistics and export.

Codes are a 3-letter school prefix followed by a 6-digit number, e.g.
``LIN100001``. Numbering per prefix continues from the highest code issued.
"""

import logging
import re
import uuid
from typing import List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ServiceValidationError
from domain.models import AppUser, ApprovalCode
from domain.schemas.community_schemas import ApprovalCodeStats, SchoolCodeStats
from repositories import ApprovalCodeRepository
from services.community_service import CommunityService

logger = logging.getLogger("dogoods.approval_codes")

SCHOOL_CODE_PATTERN = re.compile(r"^[A-Za-z]{3}$")
MAX_CODES_PER_REQUEST = 1000
MAX_CODE_NUMBER = 999999
CSV_HEADER = ["Code", "School Code", "Community", "Created At"]


class ApprovalCodeService:
    @staticmethod
    def normalize_school_code(school_code: str) -> str:
        school_code = (school_code or "").strip()
        if not SCHOOL_CODE_PATTERN.match(school_code):
            raise ServiceValidationError("School code must be exactly 3 letters")
        return school_code.upper()

    @staticmethod
    def next_number(existing_codes: List[str]) -> int:
        numbers = [int(c[3:]) for c in existing_codes if c[3:].isdigit()]
        if not numbers:
            return settings.approval_code_start
        return max(numbers) + 1

    @staticmethod
    def generate_codes(
        db: Session,
        admin: AppUser,
        community_id: uuid.UUID,
        school_code: str,
        quantity: int,
    ) -> List[str]:
        """
        Generate ``quantity`` new codes for a community.

        Returns:
            The generated code strings in ascending order

        Raises:
            ServiceValidationError: bad prefix or quantity, number space exhausted
            NotFoundError: community does not exist
        """
        prefix = ApprovalCodeService.normalize_school_code(school_code)
        if quantity < 1 or quantity > MAX_CODES_PER_REQUEST:
            raise ServiceValidationError(
                f"Quantity must be between 1 and {MAX_CODES_PER_REQUEST}"
            )
        CommunityService.get_community(db, community_id)

        repo = ApprovalCodeRepository(db)
        start = ApprovalCodeService.next_number(repo.get_codes_for_prefix(prefix))
        if start + quantity - 1 > MAX_CODE_NUMBER:
            raise ServiceValidationError(
                f"Not enough codes left for prefix {prefix} (next number {start})"
            )

        codes = [f"{prefix}{n:06d}" for n in range(start, start + quantity)]
        batch_size = settings.approval_code_batch_size
        try:
            for i in range(0, len(codes), batch_size):
                repo.bulk_insert(
                    [
                        ApprovalCode(
                            code=code,
                            school_code=prefix,
                            community_id=community_id,
                            created_by=admin.user_id,
                        )
                        for code in codes[i : i + batch_size]
                    ]
                )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed generating codes prefix=%s", prefix)
            raise

        logger.info(
            "Generated approval codes prefix=%s count=%d first=%s last=%s by=%s",
            prefix,
            len(codes),
            codes[0],
            codes[-1],
            admin.user_id,
        )
        return codes

    @staticmethod
    def list_codes(
        db: Session, community_id: Optional[uuid.UUID] = None, is_claimed: Optional[bool] = None
    ) -> List[ApprovalCode]:
        return ApprovalCodeRepository(db).list_codes(community_id, is_claimed)

    @staticmethod
    def code_stats(db: Session) -> ApprovalCodeStats:
        by_school: dict[str, SchoolCodeStats] = {}
        for row in ApprovalCodeRepository(db).count_by_school():
            stats = by_school.setdefault(row["school_code"], SchoolCodeStats())
            stats.total += row["count"]
            if row["is_claimed"]:
                stats.claimed += row["count"]
            else:
                stats.unclaimed += row["count"]

        return ApprovalCodeStats(
            total=sum(s.total for s in by_school.values()),
            claimed=sum(s.claimed for s in by_school.values()),
            unclaimed=sum(s.unclaimed for s in by_school.values()),
            by_school=by_school,
        )

    @staticmethod
    def export_unclaimed_csv(db: Session) -> str:
        """Unclaimed codes as CSV, sorted by school code then code"""
        rows = [
            (
                code.code,
                code.school_code,
                code.community.name if code.community else "",
                code.created_at.isoformat() if code.created_at else "",
            )
            for code in ApprovalCodeRepository(db).list_unclaimed_with_community()
        ]
        return pd.DataFrame(rows, columns=CSV_HEADER).to_csv(index=False)
