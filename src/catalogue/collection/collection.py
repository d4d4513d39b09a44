"""Collection: a multi-item bundle sold at a single price.

Collections are always delivered digitally. The bundle price is stored as
free text by the authoring tools, so it is coerced on read.
"""

import math
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from shared.domain import hekayaty


def coerce_price(raw: str | int | float | None) -> int:
    """Numeric value of a stored bundle price.

    Unparseable, non-finite and negative values all read as 0.
    """
    if raw is None:
        return 0
    try:
        value = float(str(raw).strip())
    except ValueError:
        return 0
    if not math.isfinite(value) or value < 0:
        return 0
    return int(round(value))


@hekayaty.aggregate
class Collection:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = String(max_length=32)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    deleted_at = DateTime()

    @property
    def bundle_price(self) -> int:
        return coerce_price(self.price)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)
