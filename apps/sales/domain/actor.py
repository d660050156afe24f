"""
Acting seller identity.

The seller behind a mutation is passed explicitly into every call that needs
it. Nothing is stored on the connection, the thread or any module global, so
one request can never pick up the identity of another.
"""

from dataclasses import dataclass
from typing import Union

from shared.domain.base import ValueObject

from ..exceptions import ConstraintViolationError


@dataclass(frozen=True)
class ActorContext(ValueObject):
    """Who is performing the current operation."""
    seller_id: int

    def __post_init__(self):
        if isinstance(self.seller_id, bool) or not isinstance(self.seller_id, int) or self.seller_id <= 0:
            raise ConstraintViolationError(
                f"Invalid acting seller id: {self.seller_id!r}",
                rule="actor_required",
            )


ActorLike = Union[ActorContext, int, None]


def require_actor(actor: ActorLike) -> ActorContext:
    """
    Resolve the caller-supplied actor or fail

    Raises ConstraintViolationError when no actor is given: a price change
    without an attributable seller would leave an audit row with no author.
    """
    if actor is None:
        raise ConstraintViolationError(
            "An acting seller must be supplied for this operation",
            rule="actor_required",
        )
    if isinstance(actor, ActorContext):
        return actor
    return ActorContext(seller_id=actor)
