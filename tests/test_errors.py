"""Tests for remote error translation."""

from __future__ import annotations

import httpx
import pytest

from sns_client.api.client import ContractCallError
from sns_client.errors import ErrorKind, SNSError, classify_message, translate_remote_error


@pytest.mark.parametrize(
    "message,kind",
    [
        ("execution reverted: Name taken", ErrorKind.UNAVAILABLE),
        ("Domain already registered", ErrorKind.UNAVAILABLE),
        ("execution reverted: Incorrect payment", ErrorKind.INSUFFICIENT_PAYMENT),
        ("Domain not found", ErrorKind.NOT_FOUND),
        ("reverted with reason string 'Invalid name'", ErrorKind.VALIDATION),
        ("caller is not owner", ErrorKind.PERMISSION),
        ("socket hang up", None),
    ],
)
def test_classify_message(message, kind):
    assert classify_message(message) is kind


def test_known_revert_becomes_specific_kind():
    err = translate_remote_error(ContractCallError("execution reverted: Name taken"), "alice", "register")
    assert err.kind is ErrorKind.UNAVAILABLE
    assert err.details["reason"] == "already registered"
    assert err.details["domain"] == "alice"


def test_unknown_failure_is_network_with_cause():
    cause = httpx.ConnectError("connection refused")
    err = translate_remote_error(cause, "alice", "resolve domain")
    assert err.kind is ErrorKind.NETWORK
    assert err.details["cause"] is cause
    assert "connection refused" in err.message


def test_sns_error_passes_through():
    original = SNSError(ErrorKind.EXPIRED, "expired")
    assert translate_remote_error(original, "alice", "resolve") is original


def test_repr_and_str():
    err = SNSError(ErrorKind.PERMISSION, "nope")
    assert str(err) == "nope"
    assert "permission" in repr(err)
