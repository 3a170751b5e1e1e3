"""
Header-synonym resolution for loosely-shaped spreadsheet rows.

Source sheets spell the same column differently ('description', 'Description',
'Model Name'). Rather than probing spellings inline, every logical field has an
ordered list of accepted headers in config.FIELD_ALIASES and lookups go
through resolve().

Functions:
    cell_text: Normalize a raw cell value to trimmed text
    resolve: First non-empty value among candidate headers
    resolve_field: resolve() using a logical field name and alias table
"""

from .config import FIELD_ALIASES


def cell_text(value):
    """
    Normalize a raw cell value to a trimmed string.

    Examples:
        >>> cell_text('  Intel ')
        'Intel'
        >>> cell_text(None)
        ''
        >>> cell_text(2.5)
        '2.5'
    """
    if value is None:
        return ""
    return str(value).strip()


def resolve(row, candidate_keys, default=""):
    """
    Return the first candidate header whose value is present and non-empty.

    Keys are matched case-sensitively; the candidate list itself carries the
    case and synonym variants to try.

    Args:
        row: Mapping of header text to raw cell value
        candidate_keys: Headers to try, highest priority first
        default: Returned when no candidate yields text

    Returns:
        The trimmed cell text, or default

    Examples:
        >>> resolve({'Description': 'QAT'}, ['description', 'Description'])
        'QAT'
        >>> resolve({'vendor': '  '}, ['vendor', 'Vendor'], 'Generic')
        'Generic'
    """
    for key in candidate_keys:
        if key not in row:
            continue
        text = cell_text(row[key])
        if text:
            return text
    return default


def resolve_field(row, field, default="", aliases=None):
    """Resolve a logical field ('vendor', 'os', ...) through the alias table."""
    table = FIELD_ALIASES if aliases is None else aliases
    return resolve(row, table.get(field, [field]), default)
