"""Contextual override rules layered on top of the base permission set.

Allow rules can turn a denial into an allow; deny rules return a reason
and are evaluated in order, first match wins. Each rule is a plain
predicate over a ``RuleInput`` so it can be tested in isolation.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from journal.core.permissions import reasons
from journal.core.permissions.catalog import USER_DELETE, USER_READ, USER_UPDATE
from journal.core.permissions.resolver import is_protected, role_rank
from journal.core.permissions.schemas import PermissionContext


if TYPE_CHECKING:
    from journal.modules.users.models import User


USER_MUTATIONS = frozenset({USER_UPDATE, USER_DELETE})


@dataclass(frozen=True)
class RuleInput:
    """Everything an override rule may look at.

    Attributes:
        user: The acting user
        permission: The token being checked
        context: Resource and actor ids for the check
        target: The user named by ``context.resource_id``, when loaded
        protected_user_count: Number of users holding the protected role,
            when loaded
    """

    user: "User"
    permission: str
    context: PermissionContext | None = None
    target: "User | None" = None
    protected_user_count: int | None = None

    @property
    def is_self(self) -> bool:
        if self.context is None or self.context.resource_id is None:
            return False
        return self.context.resource_id == self.user.id


def needs_target(user: "User", permission: str, context: PermissionContext | None) -> bool:
    """Whether evaluating this check requires loading the target user."""
    if permission not in USER_MUTATIONS:
        return False
    if context is None or context.resource_id is None:
        return False
    return context.resource_id != user.id


def needs_protected_count(permission: str, target: "User | None") -> bool:
    """Whether evaluating this check requires counting protected users."""
    return permission == USER_DELETE and target is not None and is_protected(target.role)


# Allow rules


def allows_self_read(rule: RuleInput) -> bool:
    """Users can always read their own profile."""
    return rule.is_self and rule.permission == USER_READ


def allows_self_service_update(rule: RuleInput) -> bool:
    """Users can update their own account through profile settings."""
    return (
        rule.is_self
        and rule.permission == USER_UPDATE
        and rule.context is not None
        and rule.context.self_service
    )


# Deny rules


def deny_actor_mismatch(rule: RuleInput) -> str | None:
    context = rule.context
    if context is not None and context.actor_id is not None and context.actor_id != rule.user.id:
        return reasons.CONTEXT_ACTOR_MISMATCH
    return None


def deny_self_mutation(rule: RuleInput) -> str | None:
    """Admin-interface edits and deletes of one's own account are refused."""
    if not rule.is_self:
        return None
    if rule.permission == USER_DELETE:
        return reasons.SELF_DELETE_FORBIDDEN
    if rule.permission == USER_UPDATE and not (rule.context and rule.context.self_service):
        return reasons.SELF_UPDATE_USE_PROFILE
    return None


def deny_protected_target(rule: RuleInput) -> str | None:
    """Lesser roles cannot edit or delete users ranked above them."""
    if rule.permission not in USER_MUTATIONS or rule.target is None or rule.is_self:
        return None
    actor_role = rule.user.role
    target_role = rule.target.role
    if is_protected(target_role) and not is_protected(actor_role):
        return reasons.PROTECTED_USER
    if not is_protected(actor_role) and role_rank(target_role) > role_rank(actor_role):
        return reasons.HIGHER_RANKED_USER
    return None


def deny_last_system_admin(rule: RuleInput) -> str | None:
    """The only remaining protected user cannot be deleted by anyone."""
    if rule.permission != USER_DELETE or rule.target is None:
        return None
    if not is_protected(rule.target.role):
        return None
    if rule.protected_user_count is not None and rule.protected_user_count <= 1:
        return reasons.LAST_SYSTEM_ADMIN
    return None


ALLOW_RULES: tuple[Callable[[RuleInput], bool], ...] = (
    allows_self_read,
    allows_self_service_update,
)

DENY_RULES: tuple[Callable[[RuleInput], str | None], ...] = (
    deny_actor_mismatch,
    deny_self_mutation,
    deny_protected_target,
    deny_last_system_admin,
)


def first_denial(rule: RuleInput) -> str | None:
    """Return the reason of the first deny rule that fires."""
    for deny in DENY_RULES:
        reason = deny(rule)
        if reason:
            return reason
    return None
