"""
Row classification for tall and wide sheet layouts.

Turns the raw rows of one sheet into aggregation events:

    Tall layout (one row = one product on one OS):
        Description | Vendor | Component | OS      | Driver
        QAT         | Intel  | Chipset   | RHEL 9  | 1.2.0
                    |        |           | RHEL 8  | 1.1.0    <- merged cells

    Wide layout (one row = one product on one OS, per server model):
        Description | Vendor | Operating_System | RX2530_M7 | RX2540_M7
        QAT         | Intel  | Windows 2022     | 2.5.0     | n/a

A tall row yields at most one event. A wide row yields one event per model
column holding a version, or one driver-less event when it holds none.
Firmware sheets yield FirmwareUpdate events only.

Fill-down memory lives for one call to classify_rows(), i.e. one sheet.

Functions:
    classify_rows: Dispatch a sheet's rows to the tall or wide classifier
    classify_tall: Events for a tall sheet
    classify_wide: Events for a wide sheet
    is_valid_version: Whether a wide-layout cell holds a version
    model_label: Display label for a model column header
"""

import logging
from dataclasses import dataclass
from typing import Optional

from models.catalog import DriverEntry

from .config import FIELD_ALIASES, WIDE, NOT_APPLICABLE, DEFAULT_DRIVER_VERSION
from .field_resolver import cell_text, resolve
from .fill_down import FillDownState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverObservation:
    """A driver version seen for a product, plus the row's scalar fields."""
    identity_key: str
    display_name: str
    entry: Optional[DriverEntry]   # None: product seen, no version on this row
    brand: str = ''
    category: str = ''
    status: str = ''
    form_factor: str = ''
    firmware: str = ''
    spec: str = ''
    identifier: str = ''


@dataclass(frozen=True)
class FirmwareUpdate:
    """A firmware-sheet row: updates scalars, never adds drivers."""
    identity_key: str
    display_name: str
    firmware: str = ''
    identifier: str = ''
    status: str = ''
    brand: str = ''
    category: str = ''


def is_valid_version(value):
    """
    Examples:
        >>> is_valid_version('2.5.0')
        True
        >>> is_valid_version(' N/A ')
        False
        >>> is_valid_version('')
        False
    """
    text = cell_text(value)
    return bool(text) and text.lower() != NOT_APPLICABLE


def model_label(column_name):
    """'RX2530_M7' -> 'RX2530 M7'"""
    return column_name.replace('_', ' ')


def classify_tall(sheet, rows, aliases=None):
    """
    Yield events for a tall sheet.

    Vendor and component are forward-filled; everything else is read from the
    row itself. The OS falls back to the sheet name.
    """
    aliases = FIELD_ALIASES if aliases is None else aliases
    state = FillDownState()

    for row in rows:
        description = resolve(row, aliases['description'])
        if not description:
            continue

        vendor = state.update('vendor', resolve(row, aliases['vendor']))
        component = state.update('component', resolve(row, aliases['component']))
        identifier = resolve(row, aliases['swid'])
        status = resolve(row, aliases['status'])

        if sheet.firmware:
            yield FirmwareUpdate(
                identity_key=description,
                display_name=description,
                firmware=resolve(row, aliases['firmware']),
                identifier=identifier,
                status=status,
                brand=vendor,
                category=component,
            )
            continue

        entry = DriverEntry(
            os=resolve(row, aliases['os'], sheet.name),
            version=resolve(row, aliases['driver'], DEFAULT_DRIVER_VERSION),
        )
        yield DriverObservation(
            identity_key=description,
            display_name=description,
            entry=entry,
            brand=vendor,
            category=component,
            status=status,
            form_factor=resolve(row, aliases['form_factor']),
            spec=resolve(row, aliases['spec']),
            identifier=identifier,
        )


def classify_wide(sheet, rows, aliases=None):
    """
    Yield events for a wide sheet, one per populated model column.

    A row with no populated column still yields one event with entry=None so
    the product and its scalars reach the catalog.

    A row needs a description and, after fill-down, a component or vendor.
    Rows missing either are dropped before they touch the remaining sticky
    fields.
    """
    aliases = FIELD_ALIASES if aliases is None else aliases
    state = FillDownState()

    for row in rows:
        description = resolve(row, aliases['description'])
        if not description:
            continue

        vendor = state.update('vendor', resolve(row, aliases['vendor']))
        component = state.update('component', resolve(row, aliases['component']))
        if not vendor and not component:
            continue

        form_factor = state.update('form_factor', resolve(row, aliases['form_factor']))
        firmware = state.update('firmware', resolve(row, aliases['firmware']))
        spec = state.update('spec', resolve(row, aliases['spec']))
        os_name = resolve(row, aliases['os'], sheet.name)
        identifier = resolve(row, aliases['swid'])
        status = resolve(row, aliases['status'])

        entries = [
            DriverEntry(os=os_name, model=model_label(column), version=cell_text(row.get(column)))
            for column in sheet.model_columns
            if is_valid_version(row.get(column))
        ]
        # A row with no versions still records the product and its scalars
        for entry in entries or [None]:
            yield DriverObservation(
                identity_key=description,
                display_name=description,
                entry=entry,
                brand=vendor,
                category=component,
                status=status,
                form_factor=form_factor,
                firmware=firmware,
                spec=spec,
                identifier=identifier,
            )


def classify_rows(sheet, rows, aliases=None):
    """
    Classify one sheet's rows according to its configured layout.

    Args:
        sheet: config.SheetConfig
        rows: Iterable of row mappings
        aliases: Optional override of config.FIELD_ALIASES

    Returns:
        list of DriverObservation / FirmwareUpdate events in row order
    """
    if sheet.mode == WIDE:
        events = list(classify_wide(sheet, rows, aliases))
    else:
        events = list(classify_tall(sheet, rows, aliases))
    logger.debug("Sheet '%s' (%s): %d events", sheet.name, sheet.mode, len(events))
    return events
