from jose import jwt

from admin_backend.core.security import (
    decode_remember_cookie,
    encode_remember_cookie,
    generate_api_token,
    generate_random_password,
    get_password_hash,
    verify_password,
)


def test_password_hashing():
    hashed = get_password_hash("secret123")

    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)
    assert not verify_password("secret123", "not-a-hash")


def test_random_values():
    assert len(generate_random_password()) == 16
    assert generate_random_password() != generate_random_password()
    assert len(generate_api_token()) == 64


def test_remember_cookie_roundtrip_and_tampering():
    value = encode_remember_cookie("user-1", "token-1")

    assert decode_remember_cookie(value) == ("user-1", "token-1")
    forged = jwt.encode({"sub": "user-1", "rmb": "token-1"}, "another-secret", algorithm="HS256")
    assert decode_remember_cookie(forged) is None
    assert decode_remember_cookie("garbage") is None
