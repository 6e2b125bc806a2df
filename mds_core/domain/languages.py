"""ISO 639 language codes for choosing a translation language.

Translations are keyed by alpha-3 codes (``fin``, ``eng``, ``swe``) while
browsers and locales mostly carry alpha-2 codes (``fi``, ``en``). Convert
with ``LANGUAGES`` or ``to_alpha_3`` before ``Store.set_language`` or
``get_translation``.
"""

import pycountry

# alpha-2 -> alpha-3, for the languages that have an alpha-2 code
LANGUAGES: dict[str, str] = {
    language.alpha_2: language.alpha_3
    for language in pycountry.languages
    if hasattr(language, "alpha_2")
}

# alpha-3 -> English name
LANGUAGES_ALPHA_3: dict[str, str] = {
    language.alpha_3: language.name for language in pycountry.languages
}


def to_alpha_3(code: str) -> str | None:
    """Alpha-3 code for an alpha-2 code, alpha-3 code or locale tag.

    ``"fi"``, ``"fin"``, ``"fi-FI"`` and ``"fi_FI"`` all give ``"fin"``.
    Returns None for unknown codes.
    """
    primary = code.strip().lower().replace("_", "-").split("-")[0]
    if primary in LANGUAGES_ALPHA_3:
        return primary
    return LANGUAGES.get(primary)
