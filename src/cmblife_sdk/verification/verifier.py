"""
Response signature verification for the CMB Life open platform

Platform responses carry a ``sign`` field computed over the canonical string
of every other field, without any prefix. Verification is optional: without
a configured platform public key every response is reported as unverified.
"""

import base64
import binascii
import logging
from typing import Any, Mapping, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..crypto.rsa_keys import load_public_key
from ..exceptions import CryptoError
from ..operations import ApiResponse
from ..signing.canonical import canonicalize
from ..signing.types import SIGN_FIELD, SigningErrorCodes

logger = logging.getLogger(__name__)


class ResponseVerifier:
    """
    Verifies platform response signatures against the platform public key.
    """
    
    def __init__(self, public_key: Optional[rsa.RSAPublicKey] = None):
        """
        Initialize the verifier.
        
        Args:
            public_key: Platform RSA public key; None disables verification
        """
        self._public_key = public_key
    
    @classmethod
    def from_pem(cls, pem: Optional[bytes]) -> 'ResponseVerifier':
        """
        Create a verifier from PEM key material (None or empty disables it).
        
        Raises:
            ConfigurationError: If the key cannot be parsed
        """
        return cls(load_public_key(pem) if pem else None)
    
    @property
    def enabled(self) -> bool:
        """Whether a public key is configured."""
        return self._public_key is not None
    
    def verify(self, response: Union[Mapping[str, Any], ApiResponse]) -> bool:
        """
        Check the ``sign`` field of a response.
        
        The caller's mapping is never modified.
        
        Args:
            response: Parsed response JSON or a typed response record
            
        Returns:
            bool: True only if the signature matches; False for anything
                that is not a JSON object
            
        Raises:
            CryptoError: If verification fails for a reason other than a
                mismatched or undecodable signature
        """
        fields = response.raw if isinstance(response, ApiResponse) else response
        if not isinstance(fields, Mapping):
            logger.warning(f"Response is not a JSON object: {type(fields).__name__}")
            return False
        
        if self._public_key is None:
            logger.debug("No public key configured, response left unverified")
            return False
        
        encoded_signature = fields.get(SIGN_FIELD)
        if not encoded_signature:
            logger.debug("Response has no sign field")
            return False
        
        try:
            signature = base64.b64decode(encoded_signature, validate=True)
        except (binascii.Error, ValueError, TypeError):
            logger.warning("Response sign field is not valid base64")
            return False
        
        unsigned = {key: value for key, value in fields.items() if key != SIGN_FIELD}
        message = canonicalize(unsigned).encode('utf-8')
        
        try:
            self._public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            logger.warning("Response signature does not match")
            return False
        except Exception as e:
            raise CryptoError(
                f"Response verification failed: {e}",
                SigningErrorCodes.VERIFICATION_FAILED
            ) from e
        
        return True


def create_verifier(public_key_pem: Optional[bytes] = None) -> ResponseVerifier:
    """
    Create a response verifier from PEM encoded key material.
    
    Args:
        public_key_pem: Platform public key, or None to disable verification
        
    Returns:
        ResponseVerifier: Configured verifier
    """
    return ResponseVerifier.from_pem(public_key_pem)
