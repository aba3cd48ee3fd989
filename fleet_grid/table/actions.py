"""Row action slots (add, edit, delete) and capability oracles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..types import CapabilityOracle

logger = logging.getLogger(__name__)


class TableAction(str, Enum):
    VIEW = "view"
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


# Django model permission codename prefix for each table action.
DJANGO_PERMISSION_PREFIXES = {
    TableAction.VIEW: "view",
    TableAction.ADD: "add",
    TableAction.EDIT: "change",
    TableAction.DELETE: "delete",
}


@dataclass(frozen=True)
class RowActionSlots:
    can_add: bool = False
    can_edit: bool = False
    can_delete: bool = False

    @property
    def has_actions(self) -> bool:
        return self.can_edit or self.can_delete


class AllowAllOracle:
    """Oracle for hosts without authorization: every action is allowed."""

    def can_perform(self, resource_type: str, action: str) -> bool:
        return True


class DjangoPermissionOracle:
    """
    Oracle backed by Django model permissions.

    ``resource_type`` is the model name; ``app_label`` completes the
    permission codename (``fleet.change_vehicle``).
    """

    def __init__(self, user: Any, app_label: str) -> None:
        self.user = user
        self.app_label = app_label

    def can_perform(self, resource_type: str, action: str) -> bool:
        user = self.user
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if getattr(user, "is_superuser", False):
            return True
        try:
            prefix = DJANGO_PERMISSION_PREFIXES[TableAction(action)]
        except ValueError:
            logger.debug("Unknown table action %r for %s", action, resource_type)
            return False
        model = str(resource_type).lower()
        return bool(user.has_perm(f"{self.app_label}.{prefix}_{model}"))


def is_allowed(
    oracle: Optional[CapabilityOracle],
    resource_type: Optional[str],
    action: TableAction | str,
) -> bool:
    """Ask the oracle; without an oracle or a resource type everything is shown."""
    if oracle is None or resource_type is None:
        return True
    return bool(oracle.can_perform(resource_type, TableAction(action).value))


def resolve_row_actions(
    oracle: Optional[CapabilityOracle],
    resource_type: Optional[str],
    callbacks: Any = None,
) -> RowActionSlots:
    """
    Compute which action affordances to render.

    A slot is shown when the host wired the matching callback and the oracle
    allows the action. The engine only hides UI; the backend stays
    authoritative.
    """

    def _slot(action: TableAction, callback_name: str) -> bool:
        if callbacks is None or not callable(getattr(callbacks, callback_name, None)):
            return False
        return is_allowed(oracle, resource_type, action)

    return RowActionSlots(
        can_add=_slot(TableAction.ADD, "add"),
        can_edit=_slot(TableAction.EDIT, "update"),
        can_delete=_slot(TableAction.DELETE, "remove"),
    )

