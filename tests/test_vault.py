import base64

import pytest

from cpsigner.constants import NONCE_SIZE, PBKDF2_ITERATIONS, SALT_SIZE
from cpsigner.crypto import vault
from cpsigner.exceptions import AuthenticationError

FAST = 1000


def test_default_iterations():
    assert PBKDF2_ITERATIONS == 100_000


def test_derive_key_vector():
    key = vault.derive_key("password", b"salt", iterations=1)
    assert key.hex() == "120fb6cffcf8b32c43e7225256c4f837a86548c92ccc35480805987cb70be17b"


def test_encrypt_decrypt_roundtrip():
    blob = vault.encrypt("KwDiBf89QgGbjEhKnhXJuH7LrciVrZi3qYjgd9M7rFU73sVHnoWn", "abcdefgh", FAST)
    assert vault.decrypt(blob, "abcdefgh", FAST) == (
        "KwDiBf89QgGbjEhKnhXJuH7LrciVrZi3qYjgd9M7rFU73sVHnoWn"
    )


def test_blob_layout():
    blob = vault.encrypt("secret", "abcdefgh", FAST)
    raw = base64.b64decode(blob)
    assert len(raw) == SALT_SIZE + NONCE_SIZE + len("secret") + 16


def test_encryption_is_randomized():
    a = vault.encrypt("secret", "abcdefgh", FAST)
    b = vault.encrypt("secret", "abcdefgh", FAST)
    assert a != b
    assert base64.b64decode(a)[:SALT_SIZE] != base64.b64decode(b)[:SALT_SIZE]


def test_wrong_password():
    blob = vault.encrypt("secret", "abcdefgh", FAST)
    with pytest.raises(AuthenticationError, match="Incorrect password or corrupted data"):
        vault.decrypt(blob, "abcdefgi", FAST)


def test_corrupted_blob_looks_like_wrong_password():
    blob = vault.encrypt("secret", "abcdefgh", FAST)
    raw = bytearray(base64.b64decode(blob))
    raw[-1] ^= 0x01
    tampered = base64.b64encode(bytes(raw)).decode()

    for bad in (tampered, "not base64!", base64.b64encode(b"short").decode()):
        with pytest.raises(AuthenticationError) as exc:
            vault.decrypt(bad, "abcdefgh", FAST)
        assert exc.value.message == "Incorrect password or corrupted data"


def test_iteration_count_is_part_of_key():
    blob = vault.encrypt("secret", "abcdefgh", FAST)
    with pytest.raises(AuthenticationError):
        vault.decrypt(blob, "abcdefgh", FAST + 1)
