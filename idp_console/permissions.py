"""
Permissions bitmask stuff.
"""

from pydantic import BaseModel


class Role(BaseModel):
    bitmask: int
    description: str


class Permissioning:
    admin = Role(
        bitmask=1 << 0,
        description="Administrator -- manage OAuth clients and view console statistics.",
    )
    stats_viewer = Role(
        bitmask=1 << 1,
        description="Read-only access to console statistics.",
    )

    @classmethod
    def enabled(cls, user, role):
        return user.permissions_bitmask & role.bitmask == role.bitmask

    @classmethod
    def enable(cls, user, role):
        user.permissions_bitmask |= role.bitmask
