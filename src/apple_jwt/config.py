"""
Configuration Resolution

Builds the token configuration from layered sources. Each source is reduced to a
ConfigFragment holding only the fields it sets, and fragments are merged field by
field with a fixed precedence:

    CLI options > environment variables > config file > built-in defaults

A field missing from a higher-precedence source falls through to the next one.
Resolution never fails on malformed input; bad values are dropped and hard
validation is left to the token builder.
"""
import os
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .models import (
    ConfigFragment,
    JWTConfig,
    DEFAULT_ALGORITHM,
    DEFAULT_EXPIRES_IN_DAYS,
)

logger = logging.getLogger(__name__)

ENV_KEY_ID = 'APPLE_KEY_ID'
ENV_TEAM_ID = 'APPLE_TEAM_ID'
ENV_PRIVATE_KEY = 'APPLE_PRIVATE_KEY'
ENV_PRIVATE_KEY_PATH = 'APPLE_PRIVATE_KEY_PATH'
ENV_EXPIRES_IN = 'APPLE_JWT_EXPIRES_IN'
ENV_ALGORITHM = 'APPLE_JWT_ALGORITHM'

CONFIG_FILE_NAMES = [
    '.applejwt.yaml',
    '.applejwt.yml',
    '.applejwt.json',
    '.applejwt.config.json',
    'applejwt.config.yaml',
    'applejwt.config.json',
]

# Config file keys, camelCase first, kebab-case accepted as an alias
CONFIG_FILE_KEYS = {
    'key_id': ('keyId', 'key-id'),
    'team_id': ('teamId', 'team-id'),
    'private_key_path': ('privateKeyPath', 'private-key-path'),
    'expires_in': ('expiresIn', 'expires-in'),
    'algorithm': ('algorithm',),
}

DEFAULTS = ConfigFragment(
    expires_in=DEFAULT_EXPIRES_IN_DAYS,
    algorithm=DEFAULT_ALGORITHM,
)

Fragment = Union[ConfigFragment, Mapping[str, Any], None]


def _as_dict(fragment: Fragment) -> Dict[str, Any]:
    """Reduce a fragment to its set fields, dropping values of the wrong type."""
    if fragment is None:
        return {}
    if isinstance(fragment, ConfigFragment):
        return fragment.to_dict()

    fields: Dict[str, Any] = {}
    for name in ConfigFragment.model_fields:
        value = fragment.get(name)
        if value is None:
            continue
        if name == 'expires_in':
            value = _parse_int(value)
            if value is None:
                logger.debug(f"Ignoring non-numeric expires_in={fragment.get(name)!r}")
                continue
        elif not isinstance(value, str) or not value:
            logger.debug(f"Ignoring non-string {name}")
            continue
        fields[name] = value
    return fields


def _parse_int(value: Any) -> Optional[int]:
    """Parse an integer, returning None instead of raising."""
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def merge_fragments(*fragments: Fragment) -> Dict[str, Any]:
    """
    Merge configuration fragments, lowest precedence first.

    Later fragments override earlier ones one field at a time; unset fields
    (absent or None) never override. None fragments are skipped.

    Args:
        *fragments: ConfigFragment instances or plain mappings, highest precedence last

    Returns:
        Dict of the merged fields
    """
    merged: Dict[str, Any] = {}
    for fragment in fragments:
        merged.update(_as_dict(fragment))
    return merged


def fragment_from_environment(environ: Optional[Mapping[str, str]] = None,
                              cwd: Optional[Path] = None) -> ConfigFragment:
    """
    Collapse APPLE_* environment variables into a fragment.

    - APPLE_PRIVATE_KEY wins over APPLE_PRIVATE_KEY_PATH.
    - APPLE_PRIVATE_KEY_PATH is resolved against cwd and ignored if the file is missing.
    - A non-numeric APPLE_JWT_EXPIRES_IN is ignored.
    - APPLE_JWT_ALGORITHM is copied as-is; it is checked at validation time.

    Args:
        environ: Environment mapping (defaults to os.environ)
        cwd: Directory for resolving relative key paths (defaults to Path.cwd())

    Returns:
        ConfigFragment with the fields found in the environment
    """
    if environ is None:
        environ = os.environ
    if cwd is None:
        cwd = Path.cwd()

    fields: Dict[str, Any] = {}

    if environ.get(ENV_KEY_ID):
        fields['key_id'] = environ[ENV_KEY_ID]
    if environ.get(ENV_TEAM_ID):
        fields['team_id'] = environ[ENV_TEAM_ID]

    if environ.get(ENV_PRIVATE_KEY):
        fields['private_key'] = environ[ENV_PRIVATE_KEY]
    elif environ.get(ENV_PRIVATE_KEY_PATH):
        key_path = Path(cwd) / environ[ENV_PRIVATE_KEY_PATH]
        if key_path.exists():
            fields['private_key'] = str(key_path)
        else:
            logger.debug(f"{ENV_PRIVATE_KEY_PATH} points to missing file {key_path}, ignoring")

    if environ.get(ENV_EXPIRES_IN):
        expires_in = _parse_int(environ[ENV_EXPIRES_IN])
        if expires_in is not None:
            fields['expires_in'] = expires_in
        else:
            logger.debug(f"Ignoring non-numeric {ENV_EXPIRES_IN}={environ[ENV_EXPIRES_IN]!r}")

    if environ.get(ENV_ALGORITHM):
        fields['algorithm'] = environ[ENV_ALGORITHM]

    return ConfigFragment(**fields)


def load_config_file(cwd: Optional[Path] = None) -> Optional[ConfigFragment]:
    """
    Load the first config file found in the working directory.

    Files are YAML (JSON files parse as YAML too) with the keys keyId, teamId,
    privateKeyPath, expiresIn and algorithm (kebab-case key-id etc. also accepted).
    A file that cannot be parsed is skipped with a warning and the next candidate
    is tried. privateKeyPath is resolved against cwd but not checked here.

    Args:
        cwd: Directory to search (defaults to Path.cwd())

    Returns:
        ConfigFragment from the file, or None if no usable file exists
    """
    if cwd is None:
        cwd = Path.cwd()

    for name in CONFIG_FILE_NAMES:
        config_path = Path(cwd) / name
        if not config_path.exists():
            continue

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to parse config file {name}: {e}")
            continue

        if not isinstance(data, dict):
            logger.warning(f"Config file {name} must contain a mapping, skipping")
            continue

        logger.debug(f"Loaded config file {config_path}")
        return _fragment_from_file_data(data, Path(cwd))

    return None


def _file_value(data: Dict[str, Any], field: str) -> Any:
    for key in CONFIG_FILE_KEYS[field]:
        if data.get(key) is not None:
            return data[key]
    return None


def _fragment_from_file_data(data: Dict[str, Any], cwd: Path) -> ConfigFragment:
    fields: Dict[str, Any] = {}

    for field in ('key_id', 'team_id', 'algorithm'):
        value = _file_value(data, field)
        if value:
            fields[field] = str(value)

    expires_in = _parse_int(_file_value(data, 'expires_in'))
    if expires_in is not None:
        fields['expires_in'] = expires_in

    # Existence is checked by the token builder, and only if this key wins the merge
    private_key_path = _file_value(data, 'private_key_path')
    if private_key_path:
        fields['private_key'] = str(cwd / str(private_key_path))

    return ConfigFragment(**fields)


def resolve(cli_fragment: Fragment = None,
            env_fragment: Fragment = None,
            file_fragment: Fragment = None) -> JWTConfig:
    """
    Resolve the final configuration from all sources.

    Args:
        cli_fragment: Options given on the command line
        env_fragment: Fields taken from the environment
        file_fragment: Fields taken from a config file

    Returns:
        JWTConfig with defaults applied to every unset optional field
    """
    merged = merge_fragments(DEFAULTS, file_fragment, env_fragment, cli_fragment)
    logger.debug(f"Resolved configuration fields: {sorted(merged)}")
    return JWTConfig(**merged)


def has_required_fields(config: JWTConfig) -> bool:
    """Check whether key id, team id and private key are all present."""
    return bool(config.key_id and config.team_id and config.private_key)


def load_config(cli_fragment: Fragment = None) -> JWTConfig:
    """Resolve configuration from the CLI fragment, the process environment and any config file."""
    return resolve(
        cli_fragment=cli_fragment,
        env_fragment=fragment_from_environment(),
        file_fragment=load_config_file(),
    )
