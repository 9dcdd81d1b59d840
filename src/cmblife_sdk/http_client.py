"""
HTTP transport for CMB Life open platform communication

This module posts signed, form-encoded requests to the open platform gateway
and parses the JSON answer. Every call is a single request: there are no
retries and no backoff, and a timeout is only applied when configured.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from .exceptions import HttpError, NetworkError, ProtocolError, ValidationError
from .signing.types import FieldValue
from .signing.utils import format_value
from .version import __version__

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


@dataclass
class ServerConfig:
    """Configuration for the open platform connection."""
    host: str
    scheme: str = "https"
    timeout: Optional[float] = None
    verify_ssl: bool = True

    def __post_init__(self):
        """Validate server configuration."""
        if not self.host:
            raise ValidationError("Server host cannot be empty")

        if self.scheme not in ('http', 'https'):
            raise ValidationError(f"Unsupported URL scheme: {self.scheme}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValidationError("Timeout must be positive")

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"


def encode_form(fields: Mapping[str, FieldValue]) -> str:
    """
    URL-form-encode request fields.

    Values are rendered exactly as they were signed.
    """
    return urlencode([(key, format_value(value)) for key, value in fields.items()])


class CMBLifeHttpClient:
    """
    HTTP client for the CMB Life open platform gateway.

    Wraps a ``requests.Session``; the session is not configured with any
    retry adapter.
    """

    def __init__(self, config: ServerConfig, session: Optional[requests.Session] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Server configuration settings
            session: Existing session to use instead of a new one
        """
        self.config = config
        self.session = session if session is not None else self._create_session()

        logger.info(f"Initialized CMB Life HTTP client for server: {config.base_url}")

    def _create_session(self) -> requests.Session:
        """Create HTTP session with default headers."""
        session = requests.Session()
        session.headers.update({
            'Accept': 'application/json',
            'User-Agent': f'CMBLife-Python-SDK/{__version__}'
        })
        return session

    def post(self, path: str, fields: Mapping[str, FieldValue]) -> Dict[str, Any]:
        """
        POST form-encoded fields and return the parsed JSON object.

        Args:
            path: Gateway path, e.g. ``/AccessGateway/transIn/accessToken.json``
            fields: Signed request fields

        Returns:
            dict: Parsed response body

        Raises:
            NetworkError: On connection-level failures
            HttpError: On any status other than 200 (body is not read)
            ProtocolError: If the body is not a JSON object
        """
        url = self.config.base_url + path
        body = encode_form(fields)

        try:
            logger.debug(f"Making POST request to {url}")
            response = self.session.post(
                url,
                data=body.encode('utf-8'),
                headers={'Content-Type': FORM_CONTENT_TYPE},
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                stream=True
            )
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Request timeout after {self.config.timeout} seconds", "TIMEOUT") from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Connection error: {e}", "CONNECTION_ERROR") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request failed: {e}", "REQUEST_FAILED") from e

        try:
            if response.status_code != 200:
                raise HttpError(
                    f"Server request failed: HTTP {response.status_code}",
                    status_code=response.status_code,
                    details={'path': path}
                )

            try:
                content = response.content
            except requests.exceptions.RequestException as e:
                raise NetworkError(f"Failed to read response body: {e}", "READ_FAILED") from e

            try:
                data = json.loads(content.decode('utf-8'))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise ProtocolError(f"Invalid JSON response: {e}", "INVALID_JSON", {'path': path}) from e

            if not isinstance(data, dict):
                raise ProtocolError(
                    f"Expected a JSON object, got {type(data).__name__}",
                    "INVALID_JSON",
                    {'path': path}
                )

            logger.debug(f"Received response from {path}: respCode={data.get('respCode')}")
            return data
        finally:
            response.close()

    def close(self):
        """Close the HTTP session."""
        if hasattr(self, 'session'):
            self.session.close()
            logger.debug("HTTP session closed")


def create_client(
    host: str,
    timeout: Optional[float] = None,
    verify_ssl: bool = True
) -> CMBLifeHttpClient:
    """
    Create CMB Life HTTP client with default configuration.

    Args:
        host: Open platform host name
        timeout: Request timeout in seconds (None waits indefinitely)
        verify_ssl: Whether to verify SSL certificates

    Returns:
        CMBLifeHttpClient: Configured HTTP client
    """
    config = ServerConfig(host=host, timeout=timeout, verify_ssl=verify_ssl)
    return CMBLifeHttpClient(config)
