#!/usr/bin/env python3
"""
Apple JWT generation.

Validates a resolved configuration, loads the EC private key (inline PEM content or a
key file), and signs the {iss, iat, exp} claims with an {alg, kid} header using PyJWT.
"""
import os
import time
import logging
from typing import Optional

import jwt

from .exceptions import ValidationError, KeyNotFoundError, KeyReadError, SigningError
from .models import (
    JWTConfig,
    JWTHeader,
    JWTPayload,
    KEY_FILE_EXTENSIONS,
    MAX_EXPIRES_IN_DAYS,
    MIN_EXPIRES_IN_DAYS,
    SECONDS_PER_DAY,
    SUPPORTED_ALGORITHMS,
)

logger = logging.getLogger(__name__)

PEM_BEGIN_MARKER = '-----BEGIN'
PEM_END_MARKER = '-----END'


def is_pem_content(value: str) -> bool:
    """Check whether a value carries PEM begin/end markers."""
    return PEM_BEGIN_MARKER in value and PEM_END_MARKER in value


def is_file_path(value: str) -> bool:
    """
    Best-effort guess whether a private key value is a file reference.

    A value is a path if it contains a path separator or ends with a key file
    extension. PEM content is never a path, even though base64 text contains '/'.
    """
    if is_pem_content(value):
        return False
    return '/' in value or '\\' in value or value.endswith(KEY_FILE_EXTENSIONS)


class TokenBuilder:
    """Builds signed Apple JWTs from a JWTConfig. Holds no state between calls."""

    def validate(self, config: JWTConfig) -> None:
        """
        Validate a configuration, reporting the first problem found.

        Fields are checked in a fixed order: key id, team id, private key,
        expiration, algorithm.

        Raises:
            ValidationError: Naming the first missing or invalid field
        """
        if not config.key_id:
            raise ValidationError('key_id', 'Apple Key ID is required')
        if not config.team_id:
            raise ValidationError('team_id', 'Apple Team ID is required')
        if not config.private_key:
            raise ValidationError('private_key', 'Private key is required')
        if not MIN_EXPIRES_IN_DAYS <= config.expires_in <= MAX_EXPIRES_IN_DAYS:
            raise ValidationError(
                'expires_in',
                f"Expiration days must be between {MIN_EXPIRES_IN_DAYS} and {MAX_EXPIRES_IN_DAYS}"
            )
        if config.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValidationError(
                'algorithm',
                f"Unsupported algorithm '{config.algorithm}'. "
                f"Supported algorithms: {', '.join(SUPPORTED_ALGORITHMS)}"
            )

    def resolve_private_key_material(self, config: JWTConfig) -> str:
        """
        Return the PEM key material, reading it from disk if the value is a path.

        Raises:
            KeyNotFoundError: If the value looks like a path and the file does not exist
            KeyReadError: If the file exists but cannot be read
        """
        private_key = config.private_key
        if not is_file_path(private_key):
            logger.debug("Using inline private key content")
            return private_key

        if not os.path.exists(private_key):
            raise KeyNotFoundError(private_key)

        try:
            with open(private_key, 'r', encoding='utf-8') as f:
                material = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise KeyReadError(private_key, str(e)) from e

        logger.debug(f"Read private key from {private_key}")
        return material

    def build_header(self, config: JWTConfig) -> JWTHeader:
        return JWTHeader(alg=config.algorithm, kid=config.key_id)

    def build_payload(self, config: JWTConfig, now: Optional[int] = None) -> JWTPayload:
        """
        Build the claims. iat is the current time unless `now` is given;
        exp is iat plus expires_in days.
        """
        issued_at = int(time.time()) if now is None else int(now)
        return JWTPayload(
            iss=config.team_id,
            iat=issued_at,
            exp=issued_at + config.expires_in * SECONDS_PER_DAY,
        )

    def generate(self, config: JWTConfig, now: Optional[int] = None) -> str:
        """
        Validate the configuration and produce a signed token.

        Args:
            config: Resolved configuration
            now: Issue time in epoch seconds (defaults to the current time)

        Returns:
            str: Compact JWT (header.payload.signature)

        Raises:
            ValidationError, KeyNotFoundError, KeyReadError: From validation and key loading
            SigningError: If PyJWT rejects the key or algorithm
        """
        self.validate(config)
        key_material = self.resolve_private_key_material(config)
        header = self.build_header(config)
        payload = self.build_payload(config, now=now)

        # PyJWT adds typ=JWT unless it is explicitly cleared
        headers = dict(header.model_dump(), typ=None)

        try:
            token = jwt.encode(
                payload.model_dump(),
                key_material,
                algorithm=config.algorithm,
                headers=headers,
            )
        except Exception as e:
            raise SigningError(f"JWT signing failed: {e}", algorithm=config.algorithm) from e

        logger.info(f"Generated {config.algorithm} token for team {config.team_id} "
                    f"(kid={config.key_id}, expires in {config.expires_in} days)")
        return token


def generate_apple_jwt(config: JWTConfig) -> str:
    """Validate the configuration and return a signed Apple JWT."""
    return TokenBuilder().generate(config)
