"""
Exception classes for CMB Life Python SDK
"""

from typing import Optional, Dict, Any


class CMBLifeSDKError(Exception):
    """Base exception for all CMB Life SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(CMBLifeSDKError):
    """Exception raised for missing or unusable configuration and key material"""
    pass


class ValidationError(CMBLifeSDKError):
    """Exception raised for invalid operation arguments"""
    pass


class CryptoError(CMBLifeSDKError):
    """Exception raised when signing or verification fails internally"""
    pass


class NetworkError(CMBLifeSDKError):
    """Exception raised for connection-level failures (DNS, reset, TLS)"""
    pass


class HttpError(CMBLifeSDKError):
    """Exception raised when the platform answers with a non-200 status"""
    
    def __init__(self, message: str, status_code: int, error_code: str = "HTTP_ERROR",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.status_code = status_code


class ProtocolError(CMBLifeSDKError):
    """Exception raised when a 200 response body is not a JSON object"""
    pass
