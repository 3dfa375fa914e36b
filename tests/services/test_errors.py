# mypy: ignore-errors
# tests/services/test_errors.py
"""Tests for store error translation."""

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from momlink.services.conversations import get_total_unread_count
from momlink.services.errors import TransientStoreError


def test_operational_errors_become_transient(db_session, mocker) -> None:
    """Connectivity failures surface as retryable errors."""
    mocker.patch.object(
        db_session, "query", side_effect=OperationalError("SELECT 1", {}, Exception("gone"))
    )

    with pytest.raises(TransientStoreError):
        get_total_unread_count(db_session, "alice")


def test_transient_errors_map_to_503(client, alice, auth_token, db_session, mocker) -> None:
    """The API reports an unavailable store as 503 with a retry hint."""
    mocker.patch.object(
        db_session, "query", side_effect=OperationalError("SELECT 1", {}, Exception("gone"))
    )

    response = client.get("/api/v1/messages/unread-count", headers=auth_token)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.headers["retry-after"] == "1"
