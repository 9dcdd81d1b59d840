"""
Utility functions for request signing

This module provides the timestamp and nonce generators used to fill the
``date`` and ``random`` fields, value coercion shared by the canonicalizer
and the form encoder, and percent-encoding for deep links.
"""

import secrets
from datetime import datetime
from typing import Mapping, Optional
from urllib.parse import quote

from .types import (
    DATE_FORMAT,
    DEFAULT_NONCE_LENGTH,
    DeepLinkEncoding,
    FieldValue,
)
from ..exceptions import ValidationError

# Characters left unescaped by encodeURIComponent / encodeURI respectively
_COMPONENT_SAFE = "-_.!~*'()"
_URI_SAFE = _COMPONENT_SAFE + ";,/?:@&=+$#"


def generate_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a local timestamp as ``YYYYMMDDHHMMSS``.
    
    Args:
        moment: Time to format (uses the current local time if None)
        
    Returns:
        str: 14-digit timestamp without separators
    """
    if moment is None:
        moment = datetime.now()
    return moment.strftime(DATE_FORMAT)


def generate_nonce(length: int = DEFAULT_NONCE_LENGTH) -> str:
    """
    Generate a lowercase hex nonce of exactly ``length`` characters.
    
    ``length`` random bytes are drawn and their hex form is cut down to
    ``length`` characters, so only half of the drawn bytes end up in the
    nonce. The platform's reference client behaves the same way.
    
    Args:
        length: Number of hex characters to return
        
    Returns:
        str: Lowercase hex string
        
    Raises:
        ValidationError: If length is not a positive integer
    """
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise ValidationError(
            f"Nonce length must be a positive integer, got {length!r}",
            "INVALID_NONCE_LENGTH"
        )
    return secrets.token_hex(length)[:length]


def format_value(value: FieldValue) -> str:
    """
    Render a field value the way it appears in the signed string.
    
    Follows JavaScript string conversion, which the platform applies on its
    side: booleans become ``true``/``false``, integral floats lose their
    fractional part, None becomes ``null``, lists are joined with commas
    (None items render empty) and objects render as ``[object Object]``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else format_value(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def encode_value(value: FieldValue, encoding: DeepLinkEncoding = DeepLinkEncoding.COMPONENT) -> str:
    """
    Percent-encode a field value for a deep link.
    
    Args:
        value: Raw field value
        encoding: Escaping flavour to apply
        
    Returns:
        str: UTF-8 percent-encoded value
    """
    safe = _URI_SAFE if encoding == DeepLinkEncoding.LEGACY else _COMPONENT_SAFE
    return quote(format_value(value), safe=safe)
