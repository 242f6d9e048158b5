"""
Receipt domain mappers.
Builds receipt DTOs with their item lines (listing title, quantity, unit).
"""

from typing import Iterable, Optional
from domain.models import Receipt, FoodClaim
from domain.schemas.receipt_schemas import ReceiptItem, ReceiptResponse


class ReceiptMapper:
    """Mapper for receipt transformations."""

    @staticmethod
    def item_from_claim(claim: FoodClaim) -> ReceiptItem:
        listing = claim.listing
        return ReceiptItem(
            claim_id=claim.claim_id,
            food_id=claim.food_id,
            title=listing.title if listing else "Unknown item",
            quantity=listing.quantity if listing else 0,
            unit=listing.unit if listing else None,
            status=claim.status,
        )

    @staticmethod
    def to_response(
        receipt: Receipt, claims: Optional[Iterable[FoodClaim]] = None
    ) -> ReceiptResponse:
        """
        Convert a Receipt ORM model to ReceiptResponse DTO.

        Args:
            receipt: Receipt ORM instance
            claims: Claims to list as items; defaults to the receipt's claims

        Returns:
            ReceiptResponse with one item per claim
        """
        if claims is None:
            claims = receipt.claims

        return ReceiptResponse(
            receipt_id=receipt.receipt_id,
            user_id=receipt.user_id,
            status=receipt.status,
            pickup_location=receipt.pickup_location,
            pickup_address=receipt.pickup_address,
            pickup_window=receipt.pickup_window,
            claimed_at=receipt.claimed_at,
            pickup_by=receipt.pickup_by,
            picked_up_at=receipt.picked_up_at,
            expired_at=receipt.expired_at,
            reclaimed_from_id=receipt.reclaimed_from_id,
            items=[ReceiptMapper.item_from_claim(c) for c in claims],
        )
