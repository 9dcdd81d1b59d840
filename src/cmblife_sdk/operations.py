"""
Operation records for the CMB Life open platform

Each supported operation has a small request record that validates caller
arguments and knows which fields it contributes to the signed payload, and
responses are wrapped in typed records that keep the raw JSON around for
signature verification.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import ValidationError
from .signing.types import ClientType, SignablePayload

GATEWAY_PATH = "/AccessGateway/transIn/"

APPROVAL = "approval"
ACCESS_TOKEN = "accessToken"
INCREASE_TREASURE = "increaseTreasure"
QUERY_INCREASE_TREASURE = "queryIncreaseTreasure"

DEFAULT_SCOPE = "defaultScope"
RESPONSE_TYPE_CODE = "code"
GRANT_TYPE_AUTHORIZATION_CODE = "authorizationCode"

SUCCESS_CODE = "1000"


def operation_path(operation: str) -> str:
    """Gateway path of a form POST operation."""
    return f"{GATEWAY_PATH}{operation}.json"


def _require(value: Optional[str], name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} cannot be empty", "MISSING_FIELD", {"field": name})


def _client_type(value: str) -> str:
    try:
        return ClientType(value).value
    except ValueError:
        raise ValidationError(
            f"Client type must be 'app' or 'h5', got {value!r}",
            "INVALID_CLIENT_TYPE"
        )


@dataclass(frozen=True)
class Merchant:
    """Merchant identity fields sent with every request."""
    mid: str
    aid: str

    def __post_init__(self):
        _require(self.mid, "mid")
        _require(self.aid, "aid")


@dataclass(frozen=True)
class ApprovalRequest:
    """
    Authorization deep link.

    Attributes:
        state: Opaque client state echoed back by the platform
        client_type: ``app`` or ``h5``
        callback: Page or JavaScript function called after authorization
    """
    state: str
    client_type: str = ClientType.H5.value
    callback: Optional[str] = None

    def __post_init__(self):
        _require(self.state, "state")
        object.__setattr__(self, 'client_type', _client_type(self.client_type))

    def to_fields(self, merchant: Merchant) -> SignablePayload:
        fields: SignablePayload = {
            'mid': merchant.mid,
            'aid': merchant.aid,
            'clientType': self.client_type,
            'state': self.state,
            'scope': DEFAULT_SCOPE,
            'responseType': RESPONSE_TYPE_CODE,
        }
        if self.callback:
            # Anything that is not a URL is a JavaScript function name
            if self.callback.startswith("http"):
                fields['callback'] = self.callback
            else:
                fields['callback'] = "javascript:" + self.callback
        return fields


@dataclass(frozen=True)
class AccessTokenRequest:
    """Exchange of a temporary authorization code for an access token."""
    code: str
    client_type: str = ClientType.H5.value

    def __post_init__(self):
        _require(self.code, "code")
        object.__setattr__(self, 'client_type', _client_type(self.client_type))

    def to_fields(self, merchant: Merchant) -> SignablePayload:
        return {
            'mid': merchant.mid,
            'aid': merchant.aid,
            'clientType': self.client_type,
            'grantType': GRANT_TYPE_AUTHORIZATION_CODE,
            'code': self.code,
        }


def _default_ref_token() -> str:
    return str(int(time.time() * 1000))


@dataclass(frozen=True)
class IncreaseTreasureRequest:
    """
    Credit of treasure (points) to a user.

    Attributes:
        open_id: User open id obtained with the access token
        amount: Positive number of points
        ref_token: Merchant reference used to query the credit later;
            defaults to the current epoch milliseconds
        treasure_type: Platform treasure type
        treasure_id: Platform treasure id
    """
    open_id: str
    amount: int
    ref_token: str = field(default_factory=_default_ref_token)
    treasure_type: int = 0
    treasure_id: int = 0

    def __post_init__(self):
        _require(self.open_id, "open_id")
        _require(self.ref_token, "ref_token")
        if not isinstance(self.amount, int) or isinstance(self.amount, bool) or self.amount <= 0:
            raise ValidationError(
                f"Treasure amount must be a positive integer, got {self.amount!r}",
                "INVALID_AMOUNT"
            )

    def to_fields(self, merchant: Merchant) -> SignablePayload:
        return {
            'openId': self.open_id,
            'mid': merchant.mid,
            'aid': merchant.aid,
            'treasureType': self.treasure_type,
            'treasureId': self.treasure_id,
            'treasureAmount': self.amount,
            'refToken': self.ref_token,
        }


@dataclass(frozen=True)
class QueryIncreaseTreasureRequest:
    """Status query for an earlier treasure credit."""
    open_id: str
    ref_token: str
    treasure_type: int = 0

    def __post_init__(self):
        _require(self.open_id, "open_id")
        _require(self.ref_token, "ref_token")

    def to_fields(self, merchant: Merchant) -> SignablePayload:
        return {
            'openId': self.open_id,
            'mid': merchant.mid,
            'aid': merchant.aid,
            'treasureType': self.treasure_type,
            'refToken': self.ref_token,
        }


@dataclass
class ApiResponse:
    """
    Platform response envelope.

    Attributes:
        resp_code: Result code, ``1000`` on success
        resp_msg: Human readable result message
        date: Server timestamp
        sign: Server signature over the other fields
        raw: Parsed JSON exactly as received
    """
    resp_code: str
    resp_msg: str
    date: Optional[str] = None
    sign: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.resp_code == SUCCESS_CODE

    @classmethod
    def _envelope(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'resp_code': str(data.get('respCode', '')),
            'resp_msg': str(data.get('respMsg', '')),
            'date': data.get('date'),
            'sign': data.get('sign'),
            'raw': data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApiResponse':
        return cls(**cls._envelope(data))


@dataclass
class AccessTokenResponse(ApiResponse):
    """Access token exchange result."""
    access_token: Optional[str] = None
    open_id: Optional[str] = None
    expires_in: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccessTokenResponse':
        return cls(
            access_token=data.get('accessToken'),
            open_id=data.get('openId'),
            expires_in=data.get('expiresIn'),
            **cls._envelope(data)
        )


@dataclass
class TreasureResponse(ApiResponse):
    """Treasure credit or credit-status result, tagged with its reference token."""
    ref_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ref_token: Optional[str] = None) -> 'TreasureResponse':
        return cls(
            ref_token=ref_token or data.get('refToken'),
            **cls._envelope(data)
        )
