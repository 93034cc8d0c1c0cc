"""Credential hashing behaviour."""

from __future__ import annotations

import pytest

from recruit_api.security.passwords import hash_password, verify_password


def test_digest_is_self_describing_and_salted():
    first = hash_password("correct horse", rounds=4)
    second = hash_password("correct horse", rounds=4)

    assert first.startswith("$2b$04$")
    assert first != second
    assert verify_password("correct horse", first)
    assert verify_password("correct horse", second)


def test_cost_comes_from_configuration():
    # conftest sets BCRYPT_ROUNDS=4
    assert hash_password("pw").startswith("$2b$04$")


def test_wrong_password_does_not_verify():
    digest = hash_password("correct horse", rounds=4)
    assert verify_password("battery staple", digest) is False


@pytest.mark.parametrize("digest", ["", "plaintext", "$2b$04$tooshort"])
def test_malformed_digest_never_verifies(digest):
    assert verify_password("anything", digest) is False


def test_passwords_longer_than_72_bytes_are_refused():
    with pytest.raises(ValueError):
        hash_password("x" * 73, rounds=4)
    digest = hash_password("x" * 72, rounds=4)
    assert verify_password("x" * 73, digest) is False


_PRINTABLE_SAMPLES = [
    "a",
    " ",
    "~",
    "password",
    "P@ssw0rd!",
    "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~",
    "with  several   spaces",
    "0123456789",
    "".join(chr(c) for c in range(32, 104)),
    "z" * 72,
]


@pytest.mark.parametrize("password", _PRINTABLE_SAMPLES, ids=range(len(_PRINTABLE_SAMPLES)))
def test_hash_then_verify_round_trips(password):
    digest = hash_password(password, rounds=4)
    assert verify_password(password, digest) is True


@pytest.mark.parametrize(
    "password, other",
    [
        ("password1", "password2"),
        ("Secret", "secret"),
        ("a", "b"),
        ("z" * 72, "z" * 71 + "y"),
        ("trailing", "trailing "),
    ],
)
def test_one_character_difference_does_not_verify(password, other):
    digest = hash_password(password, rounds=4)
    assert verify_password(other, digest) is False
