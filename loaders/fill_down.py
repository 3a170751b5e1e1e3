"""
Merged-cell fill-down memory.

Spreadsheet exports leave merged cells empty on every row but the first, so a
vendor or component written once applies to the rows below it until a new
value appears. FillDownState remembers the last non-empty value per sticky
field. One instance covers exactly one sheet.
"""

from .config import STICKY_FIELDS
from .field_resolver import cell_text


class FillDownState:
    """Last non-empty value seen per sticky field."""

    def __init__(self, fields=STICKY_FIELDS):
        self._fields = tuple(fields)
        self._slots = {}
        self.reset()

    def reset(self):
        """Forget every remembered value."""
        self._slots = {name: "" for name in self._fields}

    def update(self, field, raw_value):
        """
        Feed one cell of a sticky column and return the effective value.

        A non-empty value replaces the slot. An empty one leaves it alone and
        returns whatever was remembered, which is '' before the first value.

        Examples:
            >>> state = FillDownState()
            >>> state.update('vendor', 'Intel')
            'Intel'
            >>> state.update('vendor', '')
            'Intel'
        """
        if field not in self._slots:
            raise KeyError(f"'{field}' is not a fill-down field")
        text = cell_text(raw_value)
        if text:
            self._slots[field] = text
        return self._slots[field]

    def __repr__(self):
        held = {k: v for k, v in self._slots.items() if v}
        return f"<FillDownState {held}>"
