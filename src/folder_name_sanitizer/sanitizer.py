"""Pure functions for turning arbitrary directory names into Windows-safe ASCII names.

This module contains no filesystem access; only string transformations.

Every stage of the pipeline is exposed as a function returning
``(name, issues)`` so callers can explain *why* a name changed.
``sanitize_name`` chains them and returns only the final name.

The sanitization pipeline:
  1. Map the empty string to the placeholder ``_empty_``
  2. Strip control characters (0x00-0x1F)
  3. Replace Windows-forbidden characters with ``_``
  4. Transliterate non-ASCII characters to their closest ASCII equivalent
  5. Trim surrounding whitespace, then trailing dots and spaces
  6. Suffix Windows reserved device names (CON, PRN, AUX, NUL, COM1-9, LPT1-9)
  7. Truncate names exceeding the maximum length with an ellipsis marker
  8. Fall back to the placeholder if nothing printable remains
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FORBIDDEN_CHARS: frozenset[str] = frozenset('<>:"|?*\\/')
CONTROL_CHARS: frozenset[str] = frozenset(chr(c) for c in range(0x00, 0x20))

RESERVED_NAMES: frozenset[str] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{n}" for n in range(1, 10)}
    | {f"LPT{n}" for n in range(1, 10)}
)

EMPTY_NAME_PLACEHOLDER: str = "_empty_"
REPLACEMENT_CHAR: str = "_"
RESERVED_NAME_SUFFIX: str = "_"
ELLIPSIS_MARKER: str = "..."

DEFAULT_MAX_NAME_LENGTH: int = 255
WINDOWS_MAX_PATH: int = 260

_CONTROL_CHAR_RE: re.Pattern[str] = re.compile(r"[\x00-\x1f]")
_FORBIDDEN_CHAR_RE: re.Pattern[str] = re.compile(
    "[" + re.escape("".join(sorted(FORBIDDEN_CHARS))) + "]"
)
_TRAILING_DOTS_SPACES_RE: re.Pattern[str] = re.compile(r"[. ]+$")

# ---------------------------------------------------------------------------
# Unicode → ASCII lookup tables
# ---------------------------------------------------------------------------

# Base letters for U+00C0-U+00FF. A blank marks × and ÷, which are not letters.
_LATIN_1_BASES: str = (
    "AAAAAAA" "C" "EEEE" "IIII" "D" "N" "OOOOO" " " "O" "UUUU" "Y" "T" "s"  # U+00C0-U+00DF
    "aaaaaaa" "c" "eeee" "iiii" "d" "n" "ooooo" " " "o" "uuuu" "y" "t" "y"  # U+00E0-U+00FF
)

# Base letters for the whole Latin Extended-A block, U+0100-U+017F.
_LATIN_EXTENDED_A_BASES: str = (
    "AaAaAa"  # U+0100-U+0105  Ā ā Ă ă Ą ą
    "CcCcCcCc"  # U+0106-U+010D  Ć ć Ĉ ĉ Ċ ċ Č č
    "DdDd"  # U+010E-U+0111  Ď ď Đ đ
    "EeEeEeEeEe"  # U+0112-U+011B  Ē ē Ĕ ĕ Ė ė Ę ę Ě ě
    "GgGgGgGg"  # U+011C-U+0123  Ĝ ĝ Ğ ğ Ġ ġ Ģ ģ
    "HhHh"  # U+0124-U+0127  Ĥ ĥ Ħ ħ
    "IiIiIiIiIi"  # U+0128-U+0131  Ĩ ĩ Ī ī Ĭ ĭ Į į İ ı
    "Ii"  # U+0132-U+0133  Ĳ ĳ
    "Jj"  # U+0134-U+0135  Ĵ ĵ
    "Kkk"  # U+0136-U+0138  Ķ ķ ĸ
    "LlLlLlLlLl"  # U+0139-U+0142  Ĺ ĺ Ļ ļ Ľ ľ Ŀ ŀ Ł ł
    "NnNnNnnNn"  # U+0143-U+014B  Ń ń Ņ ņ Ň ň ŉ Ŋ ŋ
    "OoOoOoOo"  # U+014C-U+0153  Ō ō Ŏ ŏ Ő ő Œ œ
    "RrRrRr"  # U+0154-U+0159  Ŕ ŕ Ŗ ŗ Ř ř
    "SsSsSsSs"  # U+015A-U+0161  Ś ś Ŝ ŝ Ş ş Š š
    "TtTtTt"  # U+0162-U+0167  Ţ ţ Ť ť Ŧ ŧ
    "UuUuUuUuUuUu"  # U+0168-U+0173  Ũ ũ Ū ū Ŭ ŭ Ů ů Ű ű Ų ų
    "Ww"  # U+0174-U+0175  Ŵ ŵ
    "YyY"  # U+0176-U+0178  Ŷ ŷ Ÿ
    "ZzZzZz"  # U+0179-U+017E  Ź ź Ż ż Ž ž
    "s"  # U+017F  ſ
)

LATIN_ASCII_MAP: dict[str, str] = {
    **{chr(0x00C0 + i): base for i, base in enumerate(_LATIN_1_BASES) if base != " "},
    **{chr(0x0100 + i): base for i, base in enumerate(_LATIN_EXTENDED_A_BASES)},
}


def _match_latin_table(char: str) -> str | None:
    return LATIN_ASCII_MAP.get(char)


def _match_category(char: str) -> str | None:
    category = unicodedata.category(char)
    if category.startswith("L"):
        return "A" if category in ("Lu", "Lt") else "a"
    if category == "Nd":
        return "0"
    if char.isspace():
        return " "
    if category.startswith("P"):
        return REPLACEMENT_CHAR
    return None


# Tried in order; the first matcher returning a replacement wins.
_CHAR_MATCHERS: tuple[Callable[[str], str | None], ...] = (
    _match_latin_table,
    _match_category,
)


def transliterate_char(char: str) -> str:
    """Return the closest printable ASCII equivalent of a single non-ASCII *char*."""
    for matcher in _CHAR_MATCHERS:
        replacement = matcher(char)
        if replacement is not None:
            return replacement
    return REPLACEMENT_CHAR


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------


def strip_control_chars(name: str) -> tuple[str, list[str]]:
    """Remove ASCII control characters (0x00-0x1F).

    Returns ``(sanitized_name, issues)``.
    """
    result = _CONTROL_CHAR_RE.sub("", name)
    if result == name:
        return name, []
    codes = sorted({f"0x{ord(c):02X}" for c in name if c in CONTROL_CHARS})
    return result, [f"Removed control characters {codes}"]


def replace_forbidden_chars(name: str) -> tuple[str, list[str]]:
    """Replace each Windows-forbidden character with ``_``.

    Path separators are treated as plain characters here.
    Returns ``(sanitized_name, issues)``.
    """
    result = _FORBIDDEN_CHAR_RE.sub(REPLACEMENT_CHAR, name)
    if result == name:
        return name, []
    chars = sorted({c for c in name if c in FORBIDDEN_CHARS})
    return result, [f"Replaced forbidden characters {chars!r}"]


def transliterate_non_ascii(name: str) -> tuple[str, list[str]]:
    """Map every character above U+007F to an ASCII approximation.

    The name is NFC-normalized first so that decomposed accents (as returned
    by macOS file systems) are looked up as single letters.
    Returns ``(sanitized_name, issues)``.
    """
    if name.isascii():
        return name, []
    composed = unicodedata.normalize("NFC", name)
    result = "".join(c if ord(c) <= 0x7F else transliterate_char(c) for c in composed)
    replaced = sorted({c for c in composed if ord(c) > 0x7F})
    return result, [f"Transliterated non-ASCII characters {replaced!r}"]


def trim_dots_and_spaces(name: str) -> tuple[str, list[str]]:
    """Trim surrounding whitespace, then any run of trailing dots and spaces.

    Windows silently strips trailing dots and spaces, so a name ending in
    either can never be created faithfully. If nothing is left, the
    placeholder ``_empty_`` is returned.
    Returns ``(sanitized_name, issues)``.
    """
    issues: list[str] = []
    result = name.strip()
    if result != name:
        issues.append("Trimmed surrounding whitespace")

    match = _TRAILING_DOTS_SPACES_RE.search(result)
    if match:
        issues.append(f"Stripped trailing characters: {match.group()!r}")
        result = result[: match.start()]

    if not result:
        issues.append("Name was empty after trimming; replaced with placeholder")
        return EMPTY_NAME_PLACEHOLDER, issues
    return result, issues


def handle_reserved_names(name: str) -> tuple[str, list[str]]:
    """Append ``_`` to Windows reserved device names.

    The match is case-insensitive and exact: ``con`` becomes ``con_``, while
    ``CONSOLE`` and ``CON.txt`` are left alone.
    Returns ``(sanitized_name, issues)``.
    """
    if name.upper() in RESERVED_NAMES:
        return name + RESERVED_NAME_SUFFIX, [f"Reserved Windows device name: {name!r}"]
    return name, []


def truncate_name(name: str, max_length: int = DEFAULT_MAX_NAME_LENGTH) -> tuple[str, list[str]]:
    """Shorten *name* to exactly *max_length* characters, ending in ``...``.

    Returns ``(truncated_name, issues)``.
    """
    if len(name) <= max_length:
        return name, []
    keep = max_length - len(ELLIPSIS_MARKER)
    return name[:keep] + ELLIPSIS_MARKER, [
        f"Name length {len(name)} exceeds limit {max_length}; truncated"
    ]


def sanitize_name_with_issues(
    name: str,
    *,
    max_length: int = DEFAULT_MAX_NAME_LENGTH,
) -> tuple[str, list[str]]:
    """Run the full sanitization pipeline and report what changed.

    Returns ``(sanitized_name, all_issues)``.

    Raises:
        ValueError: If *max_length* leaves no room for the ellipsis marker.
    """
    if max_length <= len(ELLIPSIS_MARKER):
        raise ValueError(f"max_length must be greater than {len(ELLIPSIS_MARKER)}: {max_length}")

    if not name:
        return EMPTY_NAME_PLACEHOLDER, ["Empty name replaced with placeholder"]

    all_issues: list[str] = []
    stages: tuple[Callable[[str], tuple[str, list[str]]], ...] = (
        strip_control_chars,
        replace_forbidden_chars,
        transliterate_non_ascii,
        trim_dots_and_spaces,
        handle_reserved_names,
    )
    for stage in stages:
        name, issues = stage(name)
        all_issues.extend(issues)

    name, issues = truncate_name(name, max_length)
    all_issues.extend(issues)

    if not name.strip():
        all_issues.append("Name was blank after sanitization; replaced with placeholder")
        return EMPTY_NAME_PLACEHOLDER, all_issues

    return name, all_issues


def sanitize_name(name: str, *, max_length: int = DEFAULT_MAX_NAME_LENGTH) -> str:
    """Return the Windows-safe ASCII form of a single directory name.

    Deterministic and free of side effects: the same input always yields
    the same output.
    """
    sanitized, _ = sanitize_name_with_issues(name, max_length=max_length)
    return sanitized


def is_name_safe(name: str, *, max_length: int = DEFAULT_MAX_NAME_LENGTH) -> bool:
    """Return ``True`` if *name* requires no sanitization."""
    return sanitize_name(name, max_length=max_length) == name
