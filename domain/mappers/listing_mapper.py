"""
Listing domain mappers.
"""

from datetime import datetime
from typing import Optional

from domain.models import FoodListing
from domain.schemas.listing_schemas import FoodListingResponse
from services import urgency_service


class ListingMapper:
    """Mapper for food listing transformations."""

    @staticmethod
    def to_response(
        listing: FoodListing, now: Optional[datetime] = None
    ) -> FoodListingResponse:
        """Convert a FoodListing to its DTO with urgency info attached."""
        response = FoodListingResponse.model_validate(listing)
        response.urgency = urgency_service.get_urgency_info(listing, now)
        return response
