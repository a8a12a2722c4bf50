from certguard_api.app.core.security import hash_password, verify_password


def test_hash_roundtrip():
    hashed = hash_password("s3nh@forte")
    assert "$" in hashed
    assert verify_password("s3nh@forte", hashed)
    assert not verify_password("outra", hashed)


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_malformed_hash_does_not_verify():
    assert verify_password("x", "not-a-hash") is False
    assert verify_password("x", "zz$zz") is False
