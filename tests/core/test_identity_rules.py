from uuid import uuid4

import pytest

from app.core.errors import ValidationError
from app.core.identity_rules import check_can_delete_user, normalize_email


def test_normalize_email_strips_and_lowercases():
    assert normalize_email("  Ada.Lovelace@Example.COM ") == "ada.lovelace@example.com"


def test_admin_cannot_delete_self():
    admin = uuid4()
    with pytest.raises(ValidationError):
        check_can_delete_user(admin, admin)


def test_admin_can_delete_someone_else():
    check_can_delete_user(uuid4(), uuid4())
