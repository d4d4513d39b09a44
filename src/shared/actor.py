"""The authenticated actor supplied by the identity collaborator.

Credentials are issued elsewhere. Commands carry ``actor_id`` and
``actor_role`` explicitly and handlers rebuild the ``Actor`` from them, so no
use case consults ambient request state.
"""

from dataclasses import dataclass
from enum import Enum

from shared.errors import AuthorizationError


class Role(Enum):
    READER = "reader"
    CREATOR = "creator"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: Role = Role.READER

    @classmethod
    def of(cls, command) -> "Actor":
        """The actor that issued ``command``."""
        return cls(user_id=str(command.actor_id), role=Role(command.actor_role or Role.READER.value))

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def owns(self, seller_id: str) -> bool:
        return self.user_id == str(seller_id)

    def can_act_for(self, seller_id: str) -> bool:
        """True for the owning seller and for admins."""
        return self.is_admin or self.owns(seller_id)

    def as_fields(self) -> dict:
        return {"actor_id": self.user_id, "actor_role": self.role.value}


def require_admin(actor: Actor, action: str) -> None:
    if not actor.is_admin:
        raise AuthorizationError({"actor": [f"Only admins can {action}"]})
