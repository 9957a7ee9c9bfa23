"""Input string sources."""
from .strings_parser import StringsFileSource, ManualInputSource, parse_strings

__all__ = ["StringsFileSource", "ManualInputSource", "parse_strings"]
