"""
Input string sources.

Reads source-language strings from Apple ``.strings`` files, flat JSON
objects, or a caller-provided mapping.
"""
from pathlib import Path
from typing import Dict, Iterator, Mapping, Tuple
import codecs
import json
import logging
import re

from ..core.interfaces import IInputSource
from ..core.exceptions import (
    EmptySourceFileError, InvalidSourceFileError, MissingInputError, error_context
)


logger = logging.getLogger(__name__)


_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '"': '"', '\\': '\\', "'": "'", '0': '\0'}
_UNQUOTED_TOKEN = re.compile(r'[A-Za-z0-9_.$:/-]+')


class StringsSyntaxError(ValueError):
    """Raised when a .strings file is malformed."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at offset {position}")
        self.position = position


# ============================================================================
# .STRINGS PARSING
# ============================================================================

def _skip_trivia(text: str, pos: int) -> int:
    """Skip whitespace and comments."""
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
        elif text.startswith('//', pos):
            end = text.find('\n', pos)
            pos = len(text) if end == -1 else end + 1
        elif text.startswith('/*', pos):
            end = text.find('*/', pos + 2)
            if end == -1:
                raise StringsSyntaxError("Unterminated comment", pos)
            pos = end + 2
        else:
            break
    return pos


def _read_quoted(text: str, pos: int) -> Tuple[str, int]:
    """Read a double-quoted string starting at ``pos``."""
    chars = []
    pos += 1
    while pos < len(text):
        ch = text[pos]
        if ch == '"':
            return ''.join(chars), pos + 1
        if ch == '\\':
            pos += 1
            if pos >= len(text):
                break
            esc = text[pos]
            if esc in ('U', 'u'):
                digits = text[pos + 1:pos + 5]
                try:
                    chars.append(chr(int(digits, 16)))
                except ValueError:
                    raise StringsSyntaxError("Invalid unicode escape", pos)
                pos += 5
                continue
            chars.append(_ESCAPES.get(esc, esc))
        else:
            chars.append(ch)
        pos += 1
    raise StringsSyntaxError("Unterminated string", pos)


def _read_token(text: str, pos: int) -> Tuple[str, int]:
    if pos < len(text) and text[pos] == '"':
        return _read_quoted(text, pos)
    match = _UNQUOTED_TOKEN.match(text, pos)
    if not match:
        raise StringsSyntaxError("Expected string", pos)
    return match.group(0), match.end()


def _expect(text: str, pos: int, symbol: str) -> int:
    pos = _skip_trivia(text, pos)
    if not text.startswith(symbol, pos):
        raise StringsSyntaxError(f"Expected '{symbol}'", pos)
    return pos + 1


def iter_strings_entries(text: str) -> Iterator[Tuple[str, str]]:
    """
    Yield ``(key, value)`` pairs from ``.strings`` file content.

    Raises:
        StringsSyntaxError: If the content is malformed
    """
    pos = _skip_trivia(text, 0)
    while pos < len(text):
        key, pos = _read_token(text, pos)
        pos = _expect(text, pos, '=')
        pos = _skip_trivia(text, pos)
        value, pos = _read_token(text, pos)
        pos = _expect(text, pos, ';')
        yield key, value
        pos = _skip_trivia(text, pos)


def parse_strings(text: str) -> Dict[str, str]:
    """Parse ``.strings`` content into a dictionary; later keys win."""
    return dict(iter_strings_entries(text))


def _decode(data: bytes) -> str:
    """Decode file bytes, honouring a UTF-16 or UTF-8 BOM."""
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return data.decode('utf-16')
    return data.decode('utf-8-sig')


# ============================================================================
# INPUT SOURCES
# ============================================================================

class StringsFileSource(IInputSource):
    """Input strings read from a ``.strings`` or ``.json`` file."""

    SUPPORTED_SUFFIXES = ('.strings', '.json')

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def can_parse(self) -> bool:
        return self.file_path.suffix.lower() in self.SUPPORTED_SUFFIXES

    def get_input_strings(self) -> Dict[str, str]:
        """
        Parse the file.

        Returns:
            Key to source text

        Raises:
            InvalidSourceFileError: If the file is missing, unreadable or malformed
            EmptySourceFileError: If the file has no entries
        """
        file_name = self.file_path.name

        if not self.can_parse():
            raise InvalidSourceFileError(
                f"Unsupported strings file type: {self.file_path.suffix}", file_name=file_name
            )

        with error_context(f"loading strings file {file_name}", InvalidSourceFileError, logger):
            try:
                text = _decode(self.file_path.read_bytes())
            except FileNotFoundError:
                raise InvalidSourceFileError(f"Could not find strings file named {file_name}.", file_name=file_name)
            except (OSError, UnicodeDecodeError) as e:
                raise InvalidSourceFileError(f"Could not read strings file {file_name}: {e}", file_name=file_name)

            try:
                if self.file_path.suffix.lower() == '.json':
                    input_strings = self._parse_json(text)
                else:
                    input_strings = parse_strings(text)
            except ValueError as e:
                raise InvalidSourceFileError(f"Invalid strings file {file_name}: {e}", file_name=file_name)

        if not input_strings:
            raise EmptySourceFileError(f"String file {file_name} is empty.", file_name=file_name)

        logger.debug(f"Loaded {len(input_strings)} strings from {self.file_path}")
        return input_strings

    @staticmethod
    def _parse_json(text: str) -> Dict[str, str]:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("top level must be an object")
        for key, value in data.items():
            if not isinstance(value, str):
                raise ValueError(f"value for '{key}' must be a string")
        return data


class ManualInputSource(IInputSource):
    """Input strings supplied directly by the caller."""

    def __init__(self, input_strings: Mapping[str, str]):
        self.input_strings = dict(input_strings)

    def get_input_strings(self) -> Dict[str, str]:
        if not self.input_strings:
            raise MissingInputError()
        return dict(self.input_strings)
