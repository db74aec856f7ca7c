"""
Apple JWT generator.

Builds ES256/ES384/ES512-signed tokens for Apple APIs from a key id, team id and
EC private key.
"""

__version__ = '1.0.0'

from .exceptions import AppleJWTError, ValidationError, KeyNotFoundError, KeyReadError, SigningError
from .models import JWTConfig, ConfigFragment
from .config import resolve, load_config
from .generator import TokenBuilder, generate_apple_jwt
