"""Role membership for configuration changes"""
from collections import defaultdict
from typing import Dict, Set

from ..errors import Unauthorized


class RoleRegistry:
    def __init__(self):
        self._members: Dict[str, Set[str]] = defaultdict(set)

    def grant_role(self, role: str, account: str) -> None:
        self._members[role].add(account)

    def revoke_role(self, role: str, account: str) -> None:
        self._members[role].discard(account)

    def has_role(self, role: str, account: str) -> bool:
        return account in self._members.get(role, ())

    def require_role(self, role: str, account: str) -> None:
        if not self.has_role(role, account):
            raise Unauthorized(account, role)
