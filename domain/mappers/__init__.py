"""
Domain mappers package.
Handles transformation between ORM models and DTOs.
"""

from domain.mappers.receipt_mapper import ReceiptMapper
from domain.mappers.listing_mapper import ListingMapper

__all__ = ["ReceiptMapper", "ListingMapper"]
