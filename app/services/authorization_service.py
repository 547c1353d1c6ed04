"""
Authorization evaluator - capability checks over a principal's roles

The evaluator is pure: callers hand it the principal's role snapshot
(roles with permissions loaded) and a declared Requirement. It never reads
request or session state.
"""
import enum
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from app.models.role import Role


class CapabilityMode(str, enum.Enum):
    ALL = "all"
    ANY = "any"


class _AllPermissions:
    """Grant set of a superuser: contains every capability code."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __contains__(self, code: object) -> bool:
        return True

    def __repr__(self) -> str:
        return "ALL_PERMISSIONS"


ALL_PERMISSIONS = _AllPermissions()

Grants = Union[FrozenSet[str], _AllPermissions]

_DELIMITER = re.compile(r"[,|]")


@dataclass(frozen=True)
class Requirement:
    """Capability codes required by a route, combined with ALL or ANY."""

    codes: Tuple[str, ...] = ()
    mode: CapabilityMode = CapabilityMode.ALL

    @classmethod
    def of(cls, *codes: str, mode: CapabilityMode = CapabilityMode.ALL) -> "Requirement":
        cleaned = []
        for code in codes:
            code = code.strip()
            if code and code not in cleaned:
                cleaned.append(code)
        return cls(codes=tuple(cleaned), mode=CapabilityMode(mode))

    @classmethod
    def parse(cls, annotation: str) -> "Requirement":
        """
        Build a Requirement from a delimited annotation such as
        "any:leaves.view|leaves.update" or "roles.view,roles.update".

        An optional "all:" / "any:" prefix selects the mode (default ALL).
        Meant to run once when routes are declared, never per request.
        """
        mode = CapabilityMode.ALL
        head, sep, rest = annotation.partition(":")
        if sep and head.strip().lower() in (CapabilityMode.ALL.value, CapabilityMode.ANY.value):
            mode = CapabilityMode(head.strip().lower())
            annotation = rest
        return cls.of(*_DELIMITER.split(annotation), mode=mode)

    def __bool__(self) -> bool:
        return bool(self.codes)


def resolve_grants(roles: Iterable[Role]) -> Grants:
    """
    Effective capability set of a principal: ALL_PERMISSIONS when any role
    is a superuser role, otherwise the union of permission codes.
    """
    granted = set()
    for role in roles:
        if role.is_superuser:
            return ALL_PERMISSIONS
        granted.update(p.code for p in role.permissions if p.code)
    return frozenset(granted)


def authorize(roles: Optional[Iterable[Role]], requirement: Requirement) -> bool:
    """
    Decide whether a principal with the given roles satisfies requirement.

    roles is None for an unauthenticated principal. An empty requirement
    places no restriction.
    """
    if not requirement:
        return True
    if roles is None:
        return False
    roles = list(roles)
    if not roles:
        return False

    grants = resolve_grants(roles)
    if grants is ALL_PERMISSIONS:
        return True

    if requirement.mode == CapabilityMode.ANY:
        return any(code in grants for code in requirement.codes)
    return all(code in grants for code in requirement.codes)
