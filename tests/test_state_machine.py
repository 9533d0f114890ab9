import pytest

from skillswap.auth.jwt import create_user_token, decode_token
from skillswap.auth.password import hash_password, password_policy_errors, verify_password
from skillswap.models.session import RequestStatus
from skillswap.services.state_machine import ALLOWED, can_transition


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (RequestStatus.PENDING, RequestStatus.ACCEPTED, True),
        (RequestStatus.PENDING, RequestStatus.REJECTED, True),
        (RequestStatus.ACCEPTED, RequestStatus.REJECTED, True),
        (RequestStatus.ACCEPTED, RequestStatus.PENDING, False),
        (RequestStatus.REJECTED, RequestStatus.PENDING, False),
        (RequestStatus.REJECTED, RequestStatus.ACCEPTED, False),
        (RequestStatus.PENDING, RequestStatus.PENDING, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_nothing_leads_back_to_pending():
    assert all(RequestStatus.PENDING not in targets for targets in ALLOWED.values())


def test_rejected_is_terminal():
    assert ALLOWED[RequestStatus.REJECTED] == set()


def test_password_policy_accepts_strong_password():
    assert password_policy_errors("Passw0rd!") == []


def test_password_policy_lists_every_broken_rule():
    errors = password_policy_errors("abc")
    assert len(errors) == 4
    assert any("at least 8" in e for e in errors)
    assert any("digit" in e for e in errors)
    assert any("uppercase" in e for e in errors)
    assert any("non alphanumeric" in e for e in errors)


def test_password_hash_roundtrip():
    hashed = hash_password("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert verify_password("Passw0rd!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("Passw0rd!", "not-a-bcrypt-hash")


def test_token_carries_identity_claims():
    payload = decode_token(create_user_token(7, "alice", ["Admin"], profile_id=3))
    assert payload["sub"] == "7"
    assert payload["unique_name"] == "alice"
    assert payload["roles"] == ["Admin"]
    assert payload["profileId"] == 3


def test_token_without_profile_has_no_profile_claim():
    payload = decode_token(create_user_token(8, "bob", []))
    assert "profileId" not in payload


def test_tampered_token_is_rejected():
    token = create_user_token(7, "alice", [])
    assert decode_token(token + "x") is None
