"""Preferences module."""

from .manager import MissingPreferenceError, PreferenceStore
from .models import Preference
from .schemas import PageTitleFormat, Pref, PreferenceResponse

__all__ = [
    "MissingPreferenceError",
    "PreferenceStore",
    "Preference",
    "PageTitleFormat",
    "Pref",
    "PreferenceResponse",
]
