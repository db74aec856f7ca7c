"""
Pydantic models for token configuration and JWT parts.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


DEFAULT_EXPIRES_IN_DAYS = 180
MIN_EXPIRES_IN_DAYS = 1
MAX_EXPIRES_IN_DAYS = 365
DEFAULT_ALGORITHM = 'ES256'
SUPPORTED_ALGORITHMS = ('ES256', 'ES384', 'ES512')
SECONDS_PER_DAY = 24 * 60 * 60
KEY_FILE_EXTENSIONS = ('.pem', '.p8')


class ConfigFragment(BaseModel):
    """A partial configuration from a single source. Unset fields are None."""
    key_id: Optional[str] = None
    team_id: Optional[str] = None
    private_key: Optional[str] = None
    expires_in: Optional[int] = None
    algorithm: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return only the fields this source actually sets."""
        return self.model_dump(exclude_none=True)


class JWTConfig(BaseModel):
    """Resolved parameter set for one token generation run."""
    model_config = ConfigDict(frozen=True)

    key_id: Optional[str] = None
    team_id: Optional[str] = None
    private_key: Optional[str] = None
    expires_in: int = DEFAULT_EXPIRES_IN_DAYS
    algorithm: str = DEFAULT_ALGORITHM


class JWTHeader(BaseModel):
    """JWT header: signing algorithm and key identifier."""
    alg: str
    kid: str


class JWTPayload(BaseModel):
    """JWT claims: issuer (team id), issued-at and expiry in epoch seconds."""
    iss: str
    iat: int
    exp: int
