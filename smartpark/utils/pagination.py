# smartpark/utils/pagination.py
"""Offset pagination shared by all list endpoints."""

import math

from smartpark.errors import ValidationError


def paginate(query, page: int, limit: int):
    """Returns (items, total, total_pages) for a SQLAlchemy query."""
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive integers")
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total, math.ceil(total / limit)
