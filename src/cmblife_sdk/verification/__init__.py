"""
Response signature verification for CMB Life Python SDK
"""

from .verifier import ResponseVerifier, create_verifier

__all__ = [
    'ResponseVerifier',
    'create_verifier',
]
