"""Utility helpers for the Lily's Life application."""

from collections.abc import Mapping, Sequence
import os
import re
import sys
import unicodedata

if sys.platform.startswith("win"):
    import winreg
else:  # pragma: no cover - platform specific
    winreg = None


_FENCE_RE = re.compile(r"```(?:json)?")


def get_user_env_var(name: str) -> str | None:
    r"""Retrieve a user-level environment variable on Windows.

    This helper reads the ``HKCU\Environment`` registry key so that values
    configured globally are discovered even when the current process environment
    does not include them.  On non-Windows platforms it simply falls back to
    ``os.environ``.
    """
    if not sys.platform.startswith("win") or winreg is None:
        return os.environ.get(name)
    try:
        reg_key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment")
        try:
            value, _ = winreg.QueryValueEx(reg_key, name)
            return value
        finally:
            winreg.CloseKey(reg_key)
    except FileNotFoundError:
        return os.environ.get(name)


def clean_unicode(obj):
    """Recursively strip Unicode control characters from nested structures.

    Newlines and tabs are kept since narrative text is split into paragraphs.
    """
    if isinstance(obj, str):
        return "".join(
            ch for ch in obj if ch in "\n\t" or unicodedata.category(ch)[0] != "C"
        )
    if isinstance(obj, Mapping):
        return {k: clean_unicode(v) for k, v in obj.items()}
    if isinstance(obj, Sequence) and not isinstance(obj, str):
        return type(obj)(clean_unicode(v) for v in obj)
    return obj


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences that models like to wrap JSON in."""
    return _FENCE_RE.sub("", text or "").strip()
