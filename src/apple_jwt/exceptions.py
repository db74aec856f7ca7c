"""
Exception classes with built-in guidance for token generation.
"""
import sys


class AppleJWTError(Exception):
    """Base exception for all token generation errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            executable = sys.argv[0].split('/')[-1]
            args = sys.argv[1:]
            if args:
                return f"{executable} {' '.join(args)}"
            else:
                return executable
        return "apple-jwt"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ JWT generation failed: {self}
💡 Check your configuration and try again
"""


# Where each configuration field can be supplied
_FIELD_SOURCES = {
    'key_id': ('--key-id', 'APPLE_KEY_ID'),
    'team_id': ('--team-id', 'APPLE_TEAM_ID'),
    'private_key': ('--private-key', 'APPLE_PRIVATE_KEY or APPLE_PRIVATE_KEY_PATH'),
    'expires_in': ('--expires-in', 'APPLE_JWT_EXPIRES_IN'),
    'algorithm': ('--algorithm', 'APPLE_JWT_ALGORITHM'),
}


class ValidationError(AppleJWTError):
    """Raised when a configuration field is missing or out of range."""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)

    def _generate_guidance(self):
        command = self._get_current_command()
        flag, env_var = _FIELD_SOURCES.get(self.field, ('--help', None))
        lines = [
            "",
            f"❌ Invalid configuration: {self}",
            "💡 Resolve this in one of the following ways:",
            f"   1. Pass it on the command line: {command} {flag} <value>",
        ]
        if env_var:
            lines.append(f"   2. Or set the environment variable: {env_var}")
        return "\n".join(lines) + "\n"


class KeyNotFoundError(AppleJWTError):
    """Raised when the private key refers to a file that does not exist."""
    def __init__(self, path: str, message: str = None):
        self.path = path
        super().__init__(message or f"Private key file not found: {path}")

    def _generate_guidance(self):
        return f"""
❌ Private key file not found: {self.path}
💡 Check the path (relative paths are resolved from the current directory),
   or pass the key content itself: apple-jwt generate --private-key "$(cat key.p8)"
"""


class KeyReadError(AppleJWTError):
    """Raised when the private key file exists but cannot be read."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read private key file {path}: {reason}")

    def _generate_guidance(self):
        return f"""
❌ Could not read private key file: {self.path}
💡 {self.reason}
   Check the file permissions: ls -l {self.path}
"""


class SigningError(AppleJWTError):
    """Raised when the signing primitive rejects the key or algorithm."""
    def __init__(self, message: str, algorithm: str = None):
        self.algorithm = algorithm
        super().__init__(message)

    def _generate_guidance(self):
        algorithm = self.algorithm or 'the selected algorithm'
        return f"""
❌ JWT signing failed: {self}
💡 Make sure the private key is an EC key (.p8 / PEM) matching {algorithm}:
   ES256 needs a P-256 key, ES384 a P-384 key and ES512 a P-521 key
"""
