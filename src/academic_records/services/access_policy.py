"""Role-based allow/deny rules for write operations on records tables.

The policy is a flat list of ``PolicyRule`` entries keyed by role, table and
operation. Lookups apply three rules in order:

1. an explicit DENY matching the request wins;
2. otherwise an ALLOW matching the request grants access;
3. anything left unmatched is denied.

``"*"`` matches any table. Every write operation in the service layer calls
``require`` before validating or touching the session.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Sequence

from .errors import AccessDenied

logger = logging.getLogger(__name__)

ANY_TABLE = "*"


class Operation(str, enum.Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Effect(str, enum.Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


class Table(str, enum.Enum):
    STUDENTS = "students"
    COURSES = "courses"
    ENROLLMENTS = "enrollments"
    GRADES = "grades"
    AUDIT_LOG = "audit_log"
    ACTIVITY_LOG = "activity_log"


ALL_OPERATIONS: FrozenSet[Operation] = frozenset(Operation)
WRITE_OPERATIONS: FrozenSet[Operation] = frozenset({Operation.INSERT, Operation.UPDATE, Operation.DELETE})


@dataclass(frozen=True)
class PolicyRule:
    role: str
    table: str
    operations: FrozenSet[Operation]
    effect: Effect = Effect.ALLOW

    def matches(self, role: str, table: str, operation: Operation) -> bool:
        return (
            self.role == role
            and self.table in (table, ANY_TABLE)
            and operation in self.operations
        )


def _rule(role: str, table: object, operations: Iterable[Operation], effect: Effect = Effect.ALLOW) -> PolicyRule:
    table_name = table.value if isinstance(table, Table) else str(table)
    return PolicyRule(role=role, table=table_name, operations=frozenset(operations), effect=effect)


DEFAULT_RULES: Sequence[PolicyRule] = (
    _rule("admin", ANY_TABLE, ALL_OPERATIONS),
    _rule("registrar", ANY_TABLE, {Operation.SELECT}),
    _rule("registrar", Table.STUDENTS, {Operation.INSERT, Operation.UPDATE}),
    _rule("registrar", Table.STUDENTS, {Operation.DELETE}, Effect.DENY),
    _rule("registrar", Table.COURSES, {Operation.INSERT, Operation.UPDATE}),
    _rule("registrar", Table.ENROLLMENTS, WRITE_OPERATIONS),
    _rule("registrar", Table.ACTIVITY_LOG, {Operation.INSERT}),
    _rule("read_write", Table.STUDENTS, {Operation.SELECT, Operation.INSERT, Operation.UPDATE}),
    _rule("read_write", Table.STUDENTS, {Operation.DELETE}, Effect.DENY),
    _rule("read_write", Table.COURSES, {Operation.SELECT}),
    _rule("read_write", Table.ENROLLMENTS, {Operation.SELECT, Operation.INSERT}),
    _rule("read_write", Table.GRADES, {Operation.SELECT}),
    _rule("read_write", Table.ACTIVITY_LOG, {Operation.SELECT, Operation.INSERT}),
    _rule("instructor", ANY_TABLE, {Operation.SELECT}),
    _rule("instructor", Table.GRADES, WRITE_OPERATIONS),
    _rule("instructor", Table.ACTIVITY_LOG, {Operation.INSERT}),
    _rule("read_only", ANY_TABLE, {Operation.SELECT}),
)


class AccessPolicy:
    """Lookup over a fixed set of ``PolicyRule`` entries."""

    def __init__(self, rules: Iterable[PolicyRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple:
        return self._rules

    def is_allowed(self, role: str, table: object, operation: object) -> bool:
        table_name = table.value if isinstance(table, Table) else str(table)
        op = Operation(operation)
        matching = [rule for rule in self._rules if rule.matches(role, table_name, op)]
        if any(rule.effect is Effect.DENY for rule in matching):
            return False
        return any(rule.effect is Effect.ALLOW for rule in matching)

    def require(self, role: str, table: object, operation: object) -> None:
        """Raise ``AccessDenied`` unless the role may perform the operation."""

        if self.is_allowed(role, table, operation):
            return
        table_name = table.value if isinstance(table, Table) else str(table)
        op = Operation(operation)
        logger.warning("access denied: role=%s table=%s operation=%s", role, table_name, op.value)
        raise AccessDenied(role, table_name, op.value)


default_policy = AccessPolicy()


def require(role: str, table: object, operation: object) -> None:
    """Check ``role`` against the default policy."""

    default_policy.require(role, table, operation)
