"""
Text normalization for portal cell text and professor identity keys.

Golestan pages mix Arabic and Persian code points for the same letters and
print digits in Persian or Arabic-Indic form, so every piece of scraped text
goes through normalize_digits before anything else looks at it.
"""

import unicodedata

# Persian digits, Arabic-Indic digits and look-alike letters
_CELL_REPLACEMENTS = {
    '۰': '0', '۱': '1', '۲': '2', '۳': '3', '۴': '4',
    '۵': '5', '۶': '6', '۷': '7', '۸': '8', '۹': '9',
    '٠': '0', '١': '1', '٢': '2', '٣': '3', '٤': '4',
    '٥': '5', '٦': '6', '٧': '7', '٨': '8', '٩': '9',
    'ي': 'ی',
    'ك': 'ک',
    'ئ': 'ی',
    'ء': '',
    '\u200c': ' ',  # ZWNJ
    '\u200d': '',
    '\u200e': '',
    '\u200f': '',
    '\u00a0': ' ',
}

_CELL_TABLE = str.maketrans(_CELL_REPLACEMENTS)

# Heh variants only matter for identity keys
_NAME_TABLE = str.maketrans({
    'ۀ': 'ه',
    'ۂ': 'ه',
    'ۃ': 'ه',
    'ة': 'ه',
})

GENDER_LABELS = {
    'مرد': 'male',
    'پسر': 'male',
    'male': 'male',
    'زن': 'female',
    'دختر': 'female',
    'female': 'female',
    'مختلط': 'mixed',
    'mixed': 'mixed',
}


def normalize_digits(text):
    """Map digits to ASCII, unify look-alike letters and trim the result."""
    if not text:
        return ''
    return text.translate(_CELL_TABLE).strip()


def normalize_name(text):
    """
    Build the de-duplication key for a person's name.

    Applies normalize_digits, folds heh variants, composes to NFC and
    collapses internal whitespace runs. An empty result means the name
    is unusable as an identity.
    """
    text = normalize_digits(text).translate(_NAME_TABLE)
    text = unicodedata.normalize('NFC', text)
    return ' '.join(text.split())


def normalize_gender(text):
    """Return 'male', 'female' or 'mixed' for a portal label, or None."""
    return GENDER_LABELS.get(normalize_name(text).lower())
