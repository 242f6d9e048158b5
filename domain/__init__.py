"""
Domain layer for DoGoods: ORM models, pydantic schemas and enums.
Mappers live in ``domain.mappers`` and are imported directly.
"""

from domain import enums, models, schemas

__all__ = ["enums", "models", "schemas"]
