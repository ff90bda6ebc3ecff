"""AES-CBC codec for provider result payloads."""
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from bioverify_core.util import CryptoError

BLOCK_BITS = 128
KEY_SIZES = (16, 24, 32)
IV_SIZE = 16


def _material(value: str | bytes, what: str, sizes: tuple[int, ...]) -> bytes:
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    if len(raw) not in sizes:
        allowed = "/".join(str(s) for s in sizes)
        raise CryptoError(f"Invalid {what} length {len(raw)} bytes (expected {allowed})")
    return raw


def _cipher(key: str | bytes, iv: str | bytes) -> Cipher:
    return Cipher(
        algorithms.AES(_material(key, "key", KEY_SIZES)),
        modes.CBC(_material(iv, "IV", (IV_SIZE,))),
    )


def encrypt(plain: bytes, key: str | bytes, iv: str | bytes) -> bytes:
    """Encrypt with AES-CBC and PKCS#7 padding."""
    padder = padding.PKCS7(BLOCK_BITS).padder()
    padded = padder.update(plain) + padder.finalize()
    encryptor = _cipher(key, iv).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt(cipher_bytes: bytes, key: str | bytes, iv: str | bytes) -> bytes:
    """Decrypt AES-CBC/PKCS#7 ciphertext.

    Key and IV are taken as raw material; str values are used as their UTF-8
    bytes. Any failure raises CryptoError and nothing is returned.
    """
    if not cipher_bytes:
        raise CryptoError("Encrypted payload is empty")
    if len(cipher_bytes) % (BLOCK_BITS // 8):
        raise CryptoError(
            f"Encrypted payload length {len(cipher_bytes)} is not a multiple of the AES block size"
        )
    decryptor = _cipher(key, iv).decryptor()
    try:
        padded = decryptor.update(cipher_bytes) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise CryptoError(f"Decryption failed (bad padding, wrong key or IV?): {e}") from e


def decrypt_text(cipher_bytes: bytes, key: str | bytes, iv: str | bytes) -> str:
    """Decrypt and decode as UTF-8 text.

    A wrong key can occasionally yield valid padding; the strict UTF-8 decode
    catches the garbage that follows. A wrong IV garbles only the first block,
    so that block must also be free of control characters.
    """
    plain = decrypt(cipher_bytes, key, iv)
    try:
        text = plain.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CryptoError(
            "Decrypted payload is not UTF-8 text (wrong key or IV?)"
        ) from e
    if any(not (c.isprintable() or c in "\t\r\n") for c in text[:IV_SIZE]):
        raise CryptoError("Decrypted payload starts with binary data (wrong key or IV?)")
    return text
