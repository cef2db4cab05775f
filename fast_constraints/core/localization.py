"""
Localized constraint messages.

Default messages are English and live next to each constraint kind. A project
can override or translate them with `<LOCALE_PATH>/<locale>.json` files using
dot notation keys:

    {
        "validation": {
            "range": {"min": "doit être supérieur ou égal à {min}"},
            "not_blank": "ne doit pas être vide"
        }
    }

Usage:
    from fast_constraints.core.localization import __, set_locale

    __('validation.not_blank', default='must not be blank')
    __('validation.range.min', {'min': 5}, default='must be greater than or equal to {min}')
    set_locale('fr')
"""

import json
import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Dict, Any, Optional

from fast_constraints import config

__all__ = ["__", "trans", "format_message", "set_locale", "get_locale", "clear_cache", "set_locale_path"]

_translations: Dict[str, Dict[str, Any]] = {}
_LOCALE_FALLBACK = config.LOCALE_FALLBACK
_LOCALE_PATH = config.LOCALE_PATH
_current_locale: ContextVar[str] = ContextVar('locale', default=config.LOCALE_DEFAULT)


def _get_nested(data: Dict[str, Any], key: str) -> Optional[Any]:
    current = data
    for part in key.split('.'):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _load_locale(locale: str) -> Dict[str, Any]:
    """Load and cache translations for a locale. Idempotent."""
    if locale in _translations:
        return _translations[locale]

    locale_file = Path(_LOCALE_PATH) / f"{locale}.json"
    translations = {}

    if locale_file.exists():
        try:
            with locale_file.open(encoding='utf-8') as f:
                translations = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logging.warning(f"Could not load translations from {locale_file}: {e}")

    _translations[locale] = translations
    return translations


def format_message(template: str, parameters: Optional[Dict[str, Any]] = None) -> str:
    """Substitute `{name}` placeholders, leaving the template untouched if it does not fit."""
    if not parameters:
        return template
    try:
        return template.format(**parameters)
    except (KeyError, IndexError, ValueError):
        return template


def __(key: str, parameters: Optional[Dict[str, Any]] = None,
      default: Optional[str] = None, locale: Optional[str] = None) -> str:
    """
    Translate `key` for the current (or given) locale.

    Looks up the current locale, then the fallback locale, then `default`, and
    finally returns the key itself.
    """
    current_locale = locale or _current_locale.get()

    translation = _get_nested(_load_locale(current_locale), key)

    if translation is None and current_locale != _LOCALE_FALLBACK:
        translation = _get_nested(_load_locale(_LOCALE_FALLBACK), key)

    if not isinstance(translation, str):
        translation = default or key

    return format_message(translation, parameters)


def set_locale(locale: str) -> None:
    _current_locale.set(locale)


def get_locale() -> str:
    return _current_locale.get()


def clear_cache() -> None:
    _translations.clear()


def set_locale_path(path: str) -> None:
    global _LOCALE_PATH
    _LOCALE_PATH = path
    clear_cache()


trans = __
