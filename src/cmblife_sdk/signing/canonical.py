"""
Canonical string construction for CMB Life signatures

The canonical form of a field mapping is every ``key=value`` pair, sorted by
key and joined with ``&``. Values are NOT escaped here: the platform verifies
against the raw values even though deep links later carry them
percent-encoded.
"""

from typing import Mapping

from .types import (
    CMBLIFE_SCHEME,
    JSON_SUFFIX,
    SIGN_FIELD,
    FieldValue,
    SigningMode,
    SigningErrorCodes,
)
from .utils import format_value
from ..exceptions import ValidationError


def canonicalize(fields: Mapping[str, FieldValue]) -> str:
    """
    Build the canonical string for a field mapping.
    
    Args:
        fields: Field name to scalar value mapping
        
    Returns:
        str: ``k1=v1&k2=v2...`` with keys in ascending code point order
    """
    return "&".join(f"{key}={format_value(fields[key])}" for key in sorted(fields))


def build_sign_string(prefix: str, fields: Mapping[str, FieldValue]) -> str:
    """
    Build the exact string that is signed for a request.
    
    The ``sign`` field itself never takes part in the signature.
    
    Args:
        prefix: Operation prefix (see ``operation_prefix``)
        fields: Request fields
        
    Returns:
        str: ``<prefix>?<canonical string>``
    """
    unsigned = {key: value for key, value in fields.items() if key != SIGN_FIELD}
    return f"{prefix}?{canonicalize(unsigned)}"


def operation_prefix(mode: SigningMode, operation: str) -> str:
    """
    Derive the signing prefix for an operation.
    
    Args:
        mode: JSON for form POST operations, CMBLIFE for deep links
        operation: Operation name such as ``accessToken`` or ``approval``
        
    Returns:
        str: ``<operation>.json`` or ``cmblife://<operation>``
    """
    if not operation:
        raise ValidationError("Operation name cannot be empty", SigningErrorCodes.INVALID_OPERATION)
    
    if mode == SigningMode.JSON:
        return operation + JSON_SUFFIX
    return CMBLIFE_SCHEME + operation
