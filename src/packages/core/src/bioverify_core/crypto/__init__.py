"""Result payload encryption."""
from bioverify_core.crypto.codec import decrypt, decrypt_text, encrypt

__all__ = ["decrypt", "decrypt_text", "encrypt"]
