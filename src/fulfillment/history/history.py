"""StatusHistory: append-only audit trail of order line transitions.

Entries are only ever appended through ``StatusHistoryRepository.append``;
nothing updates or deletes them. The auto-increment key gives each line's
entries a total order even when timestamps collide.
"""

from datetime import UTC, datetime

from protean.fields import Auto, DateTime, Identifier, String, Text

from shared.domain import hekayaty


@hekayaty.aggregate
class StatusHistory:
    id = Auto(identifier=True, increment=True)
    order_line_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = Text()
    actor_id = Identifier()
    created_at = DateTime(default=lambda: datetime.now(UTC))


@hekayaty.repository(part_of=StatusHistory)
class StatusHistoryRepository:
    def append(
        self,
        order_line_id: str,
        status: str,
        note: str | None = None,
        actor_id: str | None = None,
    ) -> StatusHistory:
        entry = StatusHistory(order_line_id=order_line_id, status=status, note=note, actor_id=actor_id)
        self.add(entry)
        return entry

    def for_line(self, order_line_id: str) -> list[StatusHistory]:
        """A line's entries, oldest first."""
        return self._dao.query.filter(order_line_id=order_line_id).order_by("id").limit(None).all().items
