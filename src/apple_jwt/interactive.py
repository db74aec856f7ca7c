"""
Interactive prompts for collecting token configuration.

Used when required options are missing and stdin is a terminal. Values already
resolved from the command line or environment are offered as defaults.
"""
import os
import sys
import logging
from typing import Callable, Optional, Tuple

from .generator import is_file_path, is_pem_content, PEM_BEGIN_MARKER, PEM_END_MARKER
from .models import (
    JWTConfig,
    DEFAULT_ALGORITHM,
    DEFAULT_EXPIRES_IN_DAYS,
    MAX_EXPIRES_IN_DAYS,
    MIN_EXPIRES_IN_DAYS,
    SUPPORTED_ALGORITHMS,
)

logger = logging.getLogger(__name__)

MIN_ID_LENGTH = 8
DEFAULT_OUTPUT_FILE = 'apple-jwt.txt'


class PromptAborted(Exception):
    """Raised when the user closes the prompt (EOF or Ctrl-C)."""
    pass


def _validate_identifier(label: str, value: str) -> Optional[str]:
    if not value:
        return f"{label} is required"
    if len(value) < MIN_ID_LENGTH:
        return f"{label} seems too short (should be 10 characters)"
    return None


def _validate_private_key(value: str) -> Optional[str]:
    if not value:
        return "Private key is required"
    if is_file_path(value):
        if not os.path.exists(value):
            return f"Private key file not found: {value}"
    elif not is_pem_content(value):
        return "Private key content should include BEGIN and END markers"
    return None


def _validate_expires_in(value: str) -> Optional[str]:
    try:
        days = int(value)
    except ValueError:
        return "Please enter a valid number"
    if not MIN_EXPIRES_IN_DAYS <= days <= MAX_EXPIRES_IN_DAYS:
        return f"Expiration days must be between {MIN_EXPIRES_IN_DAYS} and {MAX_EXPIRES_IN_DAYS}"
    return None


class PromptSession:
    """Line-based prompts reading answers through `input_func`."""

    def __init__(self, input_func: Callable[[str], str] = input, output=None):
        self.input_func = input_func
        self.output = output if output is not None else sys.stderr

    def say(self, text: str = "") -> None:
        print(text, file=self.output)

    def _read(self, message: str) -> str:
        try:
            return self.input_func(message)
        except (EOFError, KeyboardInterrupt) as e:
            raise PromptAborted() from e

    def ask(self, message: str, default: Optional[str] = None,
            validate: Optional[Callable[[str], Optional[str]]] = None) -> str:
        """Ask until the answer passes `validate`. An empty answer takes the default."""
        suffix = f" [{default}]" if default else ""
        while True:
            answer = self._read(f"{message}{suffix}: ").strip()
            if not answer and default:
                answer = default
            error = validate(answer) if validate else None
            if error is None:
                return answer
            self.say(f"❌ {error}")

    def choose(self, message: str, choices, default: str) -> str:
        """Numbered single choice. `choices` is a list of (label, value)."""
        self.say(message)
        default_index = 1
        for index, (label, value) in enumerate(choices, start=1):
            self.say(f"  {index}) {label}")
            if value == default:
                default_index = index
        while True:
            answer = self._read(f"Select [{default_index}]: ").strip()
            if not answer:
                return choices[default_index - 1][1]
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1][1]
            for _, value in choices:
                if answer.upper() == str(value).upper():
                    return value
            self.say(f"❌ Please enter a number between 1 and {len(choices)}")

    def ask_private_key(self, default: Optional[str] = None) -> str:
        """Ask for a key path or pasted PEM content (read until the END line)."""
        if not default:
            suffix = ""
        elif is_file_path(default):
            suffix = f" [{default}]"
        else:
            # Inline key content is not echoed back
            suffix = " [keep current]"

        while True:
            first_line = self._read(f"Enter Private Key (paste content or file path){suffix}: ").strip()

            if not first_line and default:
                return default

            value = first_line
            if first_line.startswith(PEM_BEGIN_MARKER) and PEM_END_MARKER not in first_line:
                lines = [first_line]
                while True:
                    line = self._read("").rstrip()
                    lines.append(line)
                    if PEM_END_MARKER in line:
                        break
                value = "\n".join(lines)

            error = _validate_private_key(value)
            if error is None:
                return value
            self.say(f"❌ {error}")

    def collect_all_inputs(self, defaults: Optional[JWTConfig] = None) -> Tuple[JWTConfig, Optional[str]]:
        """Prompt for every field and the output destination."""
        if defaults is None:
            defaults = JWTConfig()

        self.say("Apple JWT Generator - Interactive Mode")
        self.say()

        key_id = self.ask("Enter Apple Key ID", default=defaults.key_id,
                          validate=lambda v: _validate_identifier("Apple Key ID", v))
        team_id = self.ask("Enter Apple Team ID", default=defaults.team_id,
                           validate=lambda v: _validate_identifier("Apple Team ID", v))
        private_key = self.ask_private_key(default=defaults.private_key)
        expires_in = self.ask("Enter expiration days",
                              default=str(defaults.expires_in or DEFAULT_EXPIRES_IN_DAYS),
                              validate=_validate_expires_in)
        algorithm = self.choose(
            "Select JWT algorithm:",
            [(f"{name} (Recommended)" if name == DEFAULT_ALGORITHM else name, name)
             for name in SUPPORTED_ALGORITHMS],
            default=defaults.algorithm if defaults.algorithm in SUPPORTED_ALGORITHMS else DEFAULT_ALGORITHM,
        )
        output = self.prompt_output()

        config = JWTConfig(
            key_id=key_id,
            team_id=team_id,
            private_key=private_key,
            expires_in=int(expires_in),
            algorithm=algorithm,
        )
        return config, output

    def prompt_output(self) -> Optional[str]:
        destination = self.choose(
            "Where should the JWT be output?",
            [("Console (stdout)", 'console'), ("Save to file", 'file')],
            default='console',
        )
        if destination == 'file':
            return self.ask("Enter output file path", default=DEFAULT_OUTPUT_FILE,
                            validate=lambda v: None if v else "Output file path is required")
        return None

    def confirm(self, config: JWTConfig) -> bool:
        """Show a summary of the configuration (never the key itself) and ask to proceed."""
        key_source = 'File path' if is_file_path(config.private_key or '') else 'Inline content'
        self.say()
        self.say("Configuration Summary:")
        self.say(f"   Key ID: {config.key_id}")
        self.say(f"   Team ID: {config.team_id}")
        self.say(f"   Private Key: {key_source}")
        self.say(f"   Expires In: {config.expires_in} days")
        self.say(f"   Algorithm: {config.algorithm}")
        answer = self._read("Generate JWT with these settings? [Y/n]: ").strip().lower()
        return answer in ('', 'y', 'yes')


def run_interactive_mode(defaults: Optional[JWTConfig] = None,
                         session: Optional[PromptSession] = None) -> Optional[Tuple[JWTConfig, Optional[str]]]:
    """
    Collect configuration interactively and confirm it.

    Returns:
        (config, output_path) or None if the user cancelled
    """
    if session is None:
        session = PromptSession()

    try:
        config, output = session.collect_all_inputs(defaults)
        if not session.confirm(config):
            session.say("JWT generation cancelled")
            return None
    except PromptAborted:
        session.say()
        session.say("Goodbye!")
        logger.debug("Interactive mode aborted by user")
        return None

    return config, output
