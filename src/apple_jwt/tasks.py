"""Token generation task.

Resolves configuration from CLI options, APPLE_* environment variables and an optional
config file, falls back to interactive prompts when required values are missing, and
writes the signed token to stdout or a file.
"""

import os
import sys
from pathlib import Path
from invoke import task

from .config import fragment_from_environment, has_required_fields, load_config_file, resolve
from .exceptions import AppleJWTError
from .generator import TokenBuilder
from .interactive import run_interactive_mode
from .models import ConfigFragment


@task(default=True, help={
    'key_id': 'Apple Key ID (env: APPLE_KEY_ID)',
    'team_id': 'Apple Team ID (env: APPLE_TEAM_ID)',
    'private_key': 'Private key content or file path (env: APPLE_PRIVATE_KEY or APPLE_PRIVATE_KEY_PATH)',
    'expires_in': 'Token expiration in days, 1-365 (default: 180, env: APPLE_JWT_EXPIRES_IN)',
    'algorithm': 'JWT algorithm: ES256, ES384 or ES512 (default: ES256, env: APPLE_JWT_ALGORITHM)',
    'output': 'Output file path (default: stdout)',
    'interactive': 'Prompt for every value, using resolved values as defaults',
    'quiet': 'Suppress status output to stderr (token always goes to stdout)',
    'debug': 'Enable debug logging (sets LOG_LEVEL=DEBUG)'
})
def generate(ctx, key_id=None, team_id=None, private_key=None, expires_in=None, algorithm=None,
             output=None, interactive=False, quiet=False, debug=False):
    """
    Generate a signed Apple JWT.

    The token goes to stdout (or --output). Status messages go to stderr unless --quiet is used.

    Examples:
        apple-jwt generate -k ABC123DEF4 -t XYZ789GHI0 -p ./AuthKey_ABC123DEF4.p8
        apple-jwt generate -k ABC123DEF4 -t XYZ789GHI0 -p ./key.p8 -e 30 -o token.jwt
        APPLE_KEY_ID=ABC123DEF4 APPLE_TEAM_ID=XYZ789GHI0 APPLE_PRIVATE_KEY_PATH=key.p8 apple-jwt generate -q
        apple-jwt                                            # Interactive mode
    """
    if debug:
        os.environ['LOG_LEVEL'] = 'DEBUG'
        from .logging import bootstrap_logging
        bootstrap_logging(__name__)

    def status(message):
        if not quiet:
            print(message, file=sys.stderr)

    if expires_in is not None:
        try:
            expires_in = int(expires_in)
        except ValueError:
            print(f"❌ Invalid --expires-in value: {expires_in!r} (expected a number of days)", file=sys.stderr)
            sys.exit(1)

    cli_fragment = ConfigFragment(
        key_id=key_id,
        team_id=team_id,
        private_key=private_key,
        expires_in=expires_in,
        algorithm=algorithm,
    )

    try:
        config = resolve(
            cli_fragment=cli_fragment,
            env_fragment=fragment_from_environment(),
            file_fragment=load_config_file(),
        )

        if interactive or (not has_required_fields(config) and sys.stdin.isatty()):
            result = run_interactive_mode(defaults=config)
            if result is None:
                return False
            config, prompted_output = result
            output = output or prompted_output

        status("🔑 Generating Apple JWT...")
        if config.private_key and os.path.isfile(config.private_key):
            status(f"   Private key: {config.private_key}")

        token = TokenBuilder().generate(config)

    except AppleJWTError as e:
        print(f"❌ JWT generation failed: {e}", file=sys.stderr)
        if not quiet:
            print(e.guidance, file=sys.stderr)
        sys.exit(1)

    if output:
        output_path = Path.cwd() / output
        try:
            output_path.write_text(token, encoding='utf-8')
        except OSError as e:
            print(f"❌ Failed to write token to {output_path}: {e}", file=sys.stderr)
            sys.exit(1)
        status(f"✅ JWT saved to: {output_path}")
    else:
        status("✅ JWT generated successfully!")
        print(token)

    status(f"   Key ID: {config.key_id}")
    status(f"   Team ID: {config.team_id}")
    status(f"   Algorithm: {config.algorithm}")
    status(f"   Expires in: {config.expires_in} days")
    return True
