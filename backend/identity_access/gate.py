"""
Channel/Role gate: the single place where the selected login channel is
checked against the server-recorded role.

Pure function, no I/O. Admin and staff land on the same console, yet each
channel accepts only its own role; there is no superuser bypass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .domain import Channel, Role, RouteTarget, route_for_role


MISMATCH_MESSAGES = {
    Channel.ADMIN: "This login is for administrators only.",
    Channel.STAFF: "This login is for staff only. Please use the appropriate tab.",
    Channel.DELIVERER: "This login is for deliverers only. Please use the appropriate tab.",
    Channel.CUSTOMER: "This login is for customers only. Please use the Staff tab for staff login.",
}


@dataclass(frozen=True)
class Accept:
    target: RouteTarget


@dataclass(frozen=True)
class Reject:
    channel: Channel
    message: str


GateDecision = Union[Accept, Reject]


def gate(channel: Channel, role: Optional[Role]) -> GateDecision:
    """Decide whether a user holding `role` may pass through `channel`.

    An absent role (None) never matches, so lookup failures fail closed here.
    """
    if role is not None and role is channel.required_role:
        target = route_for_role(role)
        if target is not None:
            return Accept(target)
    return Reject(channel, MISMATCH_MESSAGES[channel])


__all__ = ["Accept", "GateDecision", "MISMATCH_MESSAGES", "Reject", "gate"]
