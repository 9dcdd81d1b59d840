"""
CMB Life open platform client

High-level entry point of the SDK: holds the merchant configuration and key
material and exposes one method per supported platform operation.
"""

import logging
from typing import Any, Mapping, Optional, Union

from .config import ClientConfig
from .crypto.rsa_keys import read_key_file
from .exceptions import ConfigurationError
from .http_client import CMBLifeHttpClient, ServerConfig
from .operations import (
    ACCESS_TOKEN,
    APPROVAL,
    INCREASE_TREASURE,
    QUERY_INCREASE_TREASURE,
    AccessTokenRequest,
    AccessTokenResponse,
    ApiResponse,
    ApprovalRequest,
    IncreaseTreasureRequest,
    Merchant,
    QueryIncreaseTreasureRequest,
    TreasureResponse,
    operation_path,
)
from .signing import DeepLinkEncoding, RSASigner
from .verification import ResponseVerifier

logger = logging.getLogger(__name__)


class CMBLifeClient:
    """
    Client for the CMB Life ("掌上生活") open platform.

    Key files are read once, here; a missing or unparsable key fails the
    construction with ``ConfigurationError``. Afterwards the client only
    holds immutable state, and every method builds an independent payload,
    so calls may be issued concurrently.

    Example:
        >>> config = ClientConfig(merchant_id="...", application_id="...",
        ...                       private_key_path="merchant_private.pem")
        >>> with CMBLifeClient(config) as client:
        ...     url = client.get_approval("state-1", "https://example.com/cb")
    """

    def __init__(
        self,
        config: ClientConfig,
        http_client: Optional[CMBLifeHttpClient] = None
    ):
        """
        Initialize the client.

        Args:
            config: Merchant configuration
            http_client: Transport to use instead of a new one
        """
        self.config = config
        self.merchant = Merchant(mid=config.merchant_id, aid=config.application_id)

        password = config.private_key_password.encode('utf-8') if config.private_key_password else None
        self.signer = RSASigner.from_pem(
            read_key_file(config.private_key_path),
            password,
            nonce_length=config.nonce_length,
            log_canonical_strings=config.log_canonical_strings
        )

        public_pem = read_key_file(config.public_key_path) if config.public_key_path else None
        self.verifier = ResponseVerifier.from_pem(public_pem)

        if http_client is None:
            http_client = CMBLifeHttpClient(ServerConfig(
                host=config.host,
                timeout=config.timeout,
                verify_ssl=config.verify_ssl
            ))
        self.http_client = http_client

        logger.info(
            f"Initialized CMB Life client for merchant {config.merchant_id} "
            f"(verification {'enabled' if self.verifier.enabled else 'disabled'})"
        )

    @classmethod
    def from_options(
        cls,
        merchant_id: str,
        application_id: str,
        private_key_path: str,
        public_key_path: Optional[str] = None,
        default_client_type: Optional[str] = None,
        host: Optional[str] = None,
        **kwargs
    ) -> 'CMBLifeClient':
        """Create a client from keyword options instead of a ``ClientConfig``."""
        options = dict(kwargs)
        if default_client_type:
            options['default_client_type'] = default_client_type
        if host:
            options['host'] = host
        try:
            config = ClientConfig(
                merchant_id=merchant_id,
                application_id=application_id,
                private_key_path=private_key_path,
                public_key_path=public_key_path,
                **options
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid client option: {e}", "INVALID_OPTION") from e
        return cls(config)

    def _client_type(self, client_type: Optional[str]) -> str:
        return client_type or self.config.default_client_type

    def get_approval(
        self,
        state: str,
        callback: Optional[str] = None,
        client_type: Optional[str] = None,
        encoding: DeepLinkEncoding = DeepLinkEncoding.COMPONENT
    ) -> str:
        """
        Build the authorization (login) deep link. No network call is made.

        Args:
            state: Client state echoed back after authorization
            callback: URL, or JavaScript function name, called after
                authorization
            client_type: ``app`` or ``h5`` (configured default if None)
            encoding: Percent-encoding flavour of the link

        Returns:
            str: Signed ``cmblife://approval?...`` URL
        """
        request = ApprovalRequest(state=state, client_type=self._client_type(client_type), callback=callback)
        return self.signer.build_deep_link(APPROVAL, request.to_fields(self.merchant), encoding)

    def get_access_token(self, code: str, client_type: Optional[str] = None) -> AccessTokenResponse:
        """
        Exchange a temporary authorization code for an access token.

        Args:
            code: Authorization code delivered to the callback

        Returns:
            AccessTokenResponse: Token, open id and expiry

        Raises:
            NetworkError, HttpError, ProtocolError: On transport failures
        """
        request = AccessTokenRequest(code=code, client_type=self._client_type(client_type))
        data = self._post(ACCESS_TOKEN, request.to_fields(self.merchant))
        return AccessTokenResponse.from_dict(data)

    def increase_treasure(
        self,
        open_id: str,
        amount: int,
        ref_token: Optional[str] = None,
        treasure_type: int = 0,
        treasure_id: int = 0
    ) -> TreasureResponse:
        """
        Credit treasure (points) to a user.

        Args:
            open_id: User open id
            amount: Number of points
            ref_token: Merchant reference for a later status query; a
                millisecond timestamp is used when omitted
            treasure_type: Platform treasure type
            treasure_id: Platform treasure id

        Returns:
            TreasureResponse: Result carrying the reference token used
        """
        options = {'ref_token': ref_token} if ref_token else {}
        request = IncreaseTreasureRequest(
            open_id=open_id,
            amount=amount,
            treasure_type=treasure_type,
            treasure_id=treasure_id,
            **options
        )
        data = self._post(INCREASE_TREASURE, request.to_fields(self.merchant))
        return TreasureResponse.from_dict(data, ref_token=request.ref_token)

    def query_increase_treasure(
        self,
        open_id: str,
        ref_token: str,
        treasure_type: int = 0
    ) -> TreasureResponse:
        """
        Query the processing status of an earlier treasure credit.

        Args:
            open_id: User open id
            ref_token: Reference token of the credit
            treasure_type: Platform treasure type
        """
        request = QueryIncreaseTreasureRequest(open_id=open_id, ref_token=ref_token, treasure_type=treasure_type)
        data = self._post(QUERY_INCREASE_TREASURE, request.to_fields(self.merchant))
        return TreasureResponse.from_dict(data, ref_token=ref_token)

    def verify_response(self, response: Union[Mapping[str, Any], ApiResponse]) -> bool:
        """
        Verify a platform response signature.

        Returns False when no public key is configured or the response is
        unsigned.
        """
        return self.verifier.verify(response)

    def _post(self, operation: str, fields) -> dict:
        signed = self.signer.sign_json(operation, fields)
        return self.http_client.post(operation_path(operation), signed)

    def close(self):
        """Release the HTTP session."""
        self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
