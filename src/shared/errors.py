"""Error taxonomy for the order engine, layered on Protean's exceptions.

Field-keyed failures reuse ``protean.exceptions.ValidationError`` and carry a
``messages`` dict (``{"status": ["Cannot transition from ..."]}``). Conflicts
with current state derive from ``InvalidStateError`` and lookups of absent
records raise ``ObjectNotFoundError``, so Protean's FastAPI handlers map them
to 400, 409 and 404. Identity failures get their own 401/403 handlers in
``shared.http``.
"""

from protean.exceptions import InvalidStateError, ProteanException, ValidationError


def first_message(messages) -> str:
    if isinstance(messages, dict):
        for errors in messages.values():
            if errors:
                return errors[0] if isinstance(errors, list) else str(errors)
    elif isinstance(messages, list) and messages:
        return str(messages[0])
    elif messages:
        return str(messages)
    return "Request failed"


class InvalidCartError(ValidationError):
    """Empty cart or a cart line with an unrecognised shape."""


class InsufficientBalanceError(ValidationError):
    """A payout request exceeds the seller's available balance."""


class StaleReferenceError(InvalidStateError):
    """A referenced product, variant, collection or seller vanished mid-checkout."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(first_message(messages))


class IllegalTransitionError(InvalidStateError):
    """A state machine refused a transition from the current state."""

    def __init__(self, current: str, attempted: str, field: str = "status"):
        self.current = current
        self.attempted = attempted
        self.messages = {field: [f"Cannot transition from {current} to {attempted}"]}
        super().__init__(self.messages[field][0])


class AuthenticationError(ProteanException):
    """No authenticated actor was supplied."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(first_message(messages))


class AuthorizationError(ProteanException):
    """The actor is neither the owning seller nor an admin."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(first_message(messages))


class StockRaceWarning(UserWarning):
    """A conditional stock decrement lost a race. Emitted, never raised."""
