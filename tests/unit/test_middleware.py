"""Unit tests for request id resolution"""

import pytest
from zero_budget.api.middleware import MAX_REQUEST_ID_LENGTH, resolve_request_id


def test_incoming_id_is_kept():
    assert resolve_request_id("trace-abc-123") == "trace-abc-123"
    assert resolve_request_id("  trace-abc-123 ") == "trace-abc-123"


@pytest.mark.parametrize("incoming", [None, "", "   ", "bad\nid", "x" * (MAX_REQUEST_ID_LENGTH + 1)])
def test_unusable_id_is_replaced(incoming):
    request_id = resolve_request_id(incoming)

    assert request_id
    assert request_id != incoming
    assert len(request_id) == 32
