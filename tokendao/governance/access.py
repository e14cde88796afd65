"""
Role-based access control for admin operations.

The admin role is granted to the deployer at construction; adding or
revoking further admins is not supported.
"""

from typing import Any, Dict, Set

from eth_utils import keccak

from ..constants import ADMIN_ROLE_NAME
from ..crypto.address import normalize_address
from ..exceptions import InvalidAddressError
from .proposals import GovernanceError

ADMIN_ROLE = "0x" + keccak(text=ADMIN_ROLE_NAME).hex()


class UnauthorizedError(GovernanceError):
    """Caller lacks the role required by the operation."""


class AccessControl:
    """Capability check: ``has_role(role, principal) -> bool``."""

    def __init__(self, admin: str):
        admin = normalize_address(admin)
        self._roles: Dict[str, Set[str]] = {ADMIN_ROLE: {admin}}
        self.deployer = admin

    def has_role(self, role: str, principal: str) -> bool:
        try:
            principal = normalize_address(principal)
        except InvalidAddressError:
            return False
        return principal in self._roles.get(role, set())

    def is_admin(self, principal: str) -> bool:
        return self.has_role(ADMIN_ROLE, principal)

    def require_role(self, role: str, principal: str):
        if not self.has_role(role, principal):
            raise UnauthorizedError(
                f"AccessControl: account {str(principal).lower()} is missing role {role}"
            )

    def require_admin(self, principal: str):
        self.require_role(ADMIN_ROLE, principal)

    def to_dict(self) -> Dict[str, Any]:
        return {role: sorted(members) for role, members in self._roles.items()}
