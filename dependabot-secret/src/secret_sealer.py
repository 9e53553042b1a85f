import base64
import binascii

from nacl import bindings, public
from nacl.exceptions import CryptoError


class SealingError(ValueError):
    """Base class for failures while sealing a secret"""


class EncodingError(SealingError):
    """The public key is not valid standard base64"""


class InvalidKeyError(SealingError):
    """The decoded public key has the wrong length for a sealed box"""


class SecretSealer:
    """
    Seal secret values with a libsodium sealed box, the scheme GitHub uses
    for Actions, Codespaces and Dependabot secrets.

    libsodium is initialised when the sealer is constructed, so every call
    to seal() runs against a ready library.
    """

    def __init__(self):
        bindings.sodium_init()

    def seal(self, plaintext: str, public_key_b64: str) -> str:
        """
        Encrypt plaintext for the holder of the private key matching
        public_key_b64 and return the ciphertext as standard base64.

        A fresh ephemeral keypair is used on every call, so sealing the same
        value twice never yields the same ciphertext.
        """
        pk = self.load_public_key(public_key_b64)
        sealed = public.SealedBox(pk).encrypt(plaintext.encode('utf-8'))
        return base64.b64encode(sealed).decode('utf-8')

    @staticmethod
    def load_public_key(public_key_b64: str) -> public.PublicKey:
        try:
            raw = base64.b64decode(public_key_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Public key is not valid base64: {e}") from e

        if len(raw) != public.PublicKey.SIZE:
            raise InvalidKeyError(
                f"Public key must be {public.PublicKey.SIZE} bytes, got {len(raw)}"
            )

        try:
            return public.PublicKey(raw)
        except (CryptoError, TypeError, ValueError) as e:
            raise InvalidKeyError(f"Invalid public key: {e}") from e


def seal_secret(plaintext: str, public_key_b64: str) -> str:
    """Seal a single value with a freshly initialised sealer"""
    return SecretSealer().seal(plaintext, public_key_b64)
