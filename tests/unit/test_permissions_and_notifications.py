import logging

import pytest
from django.contrib.auth.models import AnonymousUser, Permission, User
from django.contrib.messages import get_messages
from django.contrib.messages.storage.fallback import FallbackStorage
from django.test import RequestFactory

from fleet_grid.notifications import LoggingNotifier, MessagesNotifier
from fleet_grid.table import AllowAllOracle, DjangoPermissionOracle, resolve_row_actions

pytestmark = pytest.mark.unit


class _Callbacks:
    def add(self, record):
        return None

    def update(self, record):
        return None

    def remove(self, record_id):
        return None


def test_allow_all_oracle_enables_wired_slots():
    slots = resolve_row_actions(AllowAllOracle(), "vehicle", _Callbacks())

    assert (slots.can_add, slots.can_edit, slots.can_delete) == (True, True, True)


def test_anonymous_users_are_denied():
    oracle = DjangoPermissionOracle(AnonymousUser(), "auth")

    assert oracle.can_perform("user", "view") is False


@pytest.mark.django_db
def test_django_permissions_map_to_table_actions():
    user = User.objects.create_user("dispatcher", password="x")
    user.user_permissions.add(Permission.objects.get(codename="change_user"))
    user = User.objects.get(pk=user.pk)
    oracle = DjangoPermissionOracle(user, "auth")

    slots = resolve_row_actions(oracle, "User", _Callbacks())

    assert slots.can_edit is True
    assert slots.can_delete is False
    assert slots.can_add is False
    assert oracle.can_perform("user", "archive") is False


@pytest.mark.django_db
def test_superusers_are_always_allowed():
    admin = User.objects.create_superuser("admin", "admin@example.com", "x")

    assert DjangoPermissionOracle(admin, "fleet").can_perform("vehicle", "delete") is True


def test_messages_notifier_forwards_to_django_messages():
    request = RequestFactory().get("/")
    request.session = {}
    request._messages = FallbackStorage(request)

    notifier = MessagesNotifier(request)
    notifier.success("Saved.")
    notifier.warning("Careful.")

    assert [str(message) for message in get_messages(request)] == ["Saved.", "Careful."]


def test_logging_notifier_writes_to_logger(caplog):
    with caplog.at_level(logging.INFO, logger="fleet_grid.notifications"):
        LoggingNotifier().success("Exported.")

    assert "Exported." in caplog.text
