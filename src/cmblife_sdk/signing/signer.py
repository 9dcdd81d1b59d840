"""
RSA-SHA256 request signer for the CMB Life open platform

This module implements the platform's signature scheme: the request fields
are completed with ``date`` and ``random`` defaults, canonicalized, prefixed
with the operation identifier and signed with the merchant's RSA private key
(PKCS#1 v1.5, SHA-256). The base64 signature is stored in the ``sign`` field.
"""

import base64
import logging
import warnings
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .types import (
    CMBLIFE_SCHEME,
    DATE_FIELD,
    DEFAULT_NONCE_LENGTH,
    RANDOM_FIELD,
    SIGN_FIELD,
    DeepLinkEncoding,
    SignablePayload,
    SigningErrorCodes,
    SigningMode,
)
from .canonical import build_sign_string, operation_prefix
from .utils import generate_nonce, generate_timestamp, encode_value
from ..crypto.rsa_keys import load_private_key
from ..exceptions import CryptoError, ValidationError

logger = logging.getLogger(__name__)


class RSASigner:
    """
    Signs request payloads with a merchant RSA private key.

    The signer holds only the parsed key and a few settings, so one
    instance can be shared by any number of concurrent calls.
    """

    def __init__(
        self,
        private_key: rsa.RSAPrivateKey,
        nonce_length: int = DEFAULT_NONCE_LENGTH,
        log_canonical_strings: bool = False
    ):
        """
        Initialize the signer.

        Args:
            private_key: Parsed RSA private key
            nonce_length: Length of generated ``random`` values
            log_canonical_strings: Log every string to sign at DEBUG level
        """
        if not isinstance(nonce_length, int) or isinstance(nonce_length, bool) or nonce_length <= 0:
            raise ValidationError(
                "Nonce length must be a positive integer",
                SigningErrorCodes.INVALID_NONCE_LENGTH
            )

        self._private_key = private_key
        self.nonce_length = nonce_length
        self.log_canonical_strings = log_canonical_strings

    @classmethod
    def from_pem(cls, pem: bytes, password: Optional[bytes] = None, **kwargs) -> 'RSASigner':
        """
        Create a signer from PEM key material.

        Raises:
            ConfigurationError: If the key cannot be parsed
        """
        return cls(load_private_key(pem, password), **kwargs)

    def sign(self, prefix: str, payload: SignablePayload) -> SignablePayload:
        """
        Sign a payload in place.

        Missing ``date`` and ``random`` fields are filled in first, so they
        are covered by the signature. Values the caller already set are
        left alone.

        Args:
            prefix: Operation prefix, e.g. ``accessToken.json``
            payload: Request fields; mutated

        Returns:
            dict: The same payload with ``sign`` added

        Raises:
            CryptoError: If the signature cannot be produced
        """
        if not payload.get(DATE_FIELD):
            payload[DATE_FIELD] = generate_timestamp()
        if not payload.get(RANDOM_FIELD):
            payload[RANDOM_FIELD] = generate_nonce(self.nonce_length)

        sign_string = build_sign_string(prefix, payload)
        if self.log_canonical_strings:
            logger.debug(f"String to sign: {sign_string}")

        try:
            signature = self._private_key.sign(
                sign_string.encode('utf-8'),
                padding.PKCS1v15(),
                hashes.SHA256()
            )
        except Exception as e:
            raise CryptoError(
                f"Failed to sign request: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"prefix": prefix}
            ) from e

        payload[SIGN_FIELD] = base64.b64encode(signature).decode('ascii')
        logger.debug(f"Signed request for {prefix}")
        return payload

    def sign_json(self, operation: str, payload: SignablePayload) -> SignablePayload:
        """Sign a form POST payload with the ``<operation>.json`` prefix."""
        return self.sign(operation_prefix(SigningMode.JSON, operation), payload)

    def sign_cmblife(self, operation: str, payload: SignablePayload) -> SignablePayload:
        """Sign a deep-link payload with the ``cmblife://<operation>`` prefix."""
        return self.sign(operation_prefix(SigningMode.CMBLIFE, operation), payload)

    def build_deep_link(
        self,
        operation: str,
        payload: SignablePayload,
        encoding: DeepLinkEncoding = DeepLinkEncoding.COMPONENT
    ) -> str:
        """
        Sign a payload and render it as a ``cmblife://`` deep link.

        Fields appear sorted by key with ``sign`` last. Only the rendered
        URL is percent-encoded; the signature covers the raw values.

        Args:
            operation: Deep-link operation, e.g. ``approval``
            payload: Request fields; mutated
            encoding: Percent-encoding flavour for the URL

        Returns:
            str: ``cmblife://<operation>?k1=v1&...&sign=<signature>``
        """
        if encoding == DeepLinkEncoding.LEGACY:
            warnings.warn(
                "DeepLinkEncoding.LEGACY leaves URI delimiters in values unescaped "
                "and will be removed; use DeepLinkEncoding.COMPONENT",
                DeprecationWarning,
                stacklevel=2
            )

        signed = self.sign_cmblife(operation, payload)
        pairs = [
            f"{key}={encode_value(signed[key], encoding)}"
            for key in sorted(signed)
            if key != SIGN_FIELD
        ]
        pairs.append(f"{SIGN_FIELD}={encode_value(signed[SIGN_FIELD], encoding)}")
        return f"{CMBLIFE_SCHEME}{operation}?{'&'.join(pairs)}"


def create_signer(
    private_key_pem: bytes,
    password: Optional[bytes] = None,
    nonce_length: int = DEFAULT_NONCE_LENGTH
) -> RSASigner:
    """
    Create a signer from PEM encoded key material.

    Args:
        private_key_pem: PEM encoded RSA private key
        password: Passphrase for encrypted keys
        nonce_length: Length of generated ``random`` values

    Returns:
        RSASigner: Configured signer
    """
    return RSASigner.from_pem(private_key_pem, password, nonce_length=nonce_length)
