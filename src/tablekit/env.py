"""Environment-based defaults for width measurement."""

from __future__ import annotations

import os

DEFAULT_TAB_WIDTH = 8
MAX_TAB_WIDTH = 32

_CJK_PREFIXES = ("zh", "ja", "ko")
_CJK_REGIONS = {"cn", "tw", "hk", "jp", "kr", "mo", "sg"}


def _env_int(name: str) -> int:
    value = os.environ.get(name, "")
    try:
        return int(value)
    except ValueError:
        return 0


def default_tab_width() -> int:
    """Tab stop from ``TABWIDTH``, ``TS`` or ``VIM_TABSTOP``, else 8.

    Values are clamped to ``1..32``.
    """
    for name in ("TABWIDTH", "TS", "VIM_TABSTOP"):
        width = _env_int(name)
        if width > 0:
            return min(width, MAX_TAB_WIDTH)
    return DEFAULT_TAB_WIDTH


def detect_east_asian() -> bool:
    """Return ``True`` when the locale asks for East Asian ambiguous widths.

    The locale is read from ``LC_ALL``, ``LC_CTYPE`` then ``LANG``.
    """
    locale = (
        os.environ.get("LC_ALL")
        or os.environ.get("LC_CTYPE")
        or os.environ.get("LANG")
        or ""
    )
    if locale in ("", "C", "POSIX"):
        return False

    # Drop encoding (".UTF-8") and modifiers ("@euro")
    locale = locale.split(".", 1)[0].split("@", 1)[0].lower()

    if locale.startswith(_CJK_PREFIXES):
        return True
    parts = locale.split("_")
    return any(part in _CJK_REGIONS for part in parts[1:])
