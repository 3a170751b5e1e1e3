"""
Aggregation of classified row events into a Catalog.

Products are keyed by the trimmed description only. Rows from different
sheets, or with different vendors, that share a description become one
product; scalar fields follow the last non-empty value seen.

Functions:
    aggregate: Fold events into a Catalog
    build_catalog: Classify and aggregate several sheets in order
"""

import logging
from dataclasses import replace

from models.catalog import Catalog, Product

from .config import DEFAULT_BRAND, DEFAULT_CATEGORY, DEFAULT_FIRMWARE
from .row_classifier import DriverObservation, FirmwareUpdate, classify_rows

logger = logging.getLogger(__name__)

# Event attribute -> Product attribute, overwritten when non-empty
_DRIVER_SCALARS = {
    'brand': 'brand',
    'category': 'category',
    'status': 'status',
    'form_factor': 'form_factor',
    'firmware': 'firmware_version',
    'spec': 'spec',
    'identifier': 'identifier',
}
_FIRMWARE_SCALARS = {
    'firmware': 'firmware_version',
    'identifier': 'identifier',
    'status': 'status',
}


def _new_product(event):
    product = Product(identity_key=event.identity_key, display_name=event.display_name)
    return replace(
        product,
        brand=event.brand or DEFAULT_BRAND,
        category=event.category or DEFAULT_CATEGORY,
        firmware_version=DEFAULT_FIRMWARE,
    )


def _overwrite(product, event, field_map):
    changes = {}
    for event_attr, product_attr in field_map.items():
        value = getattr(event, event_attr)
        if value:
            changes[product_attr] = value
    return replace(product, **changes) if changes else product


def aggregate(events):
    """
    Fold classified events into a Catalog.

    DriverObservation: create the product if needed, take the event's
    non-empty scalars, append its driver entry (if any). Identical entries
    are kept.

    FirmwareUpdate: create the product if needed, then overwrite firmware,
    identifier and status with whichever are non-empty. Drivers untouched.

    Args:
        events: Iterable of DriverObservation / FirmwareUpdate

    Returns:
        Catalog in order of first appearance of each identity key
    """
    products = {}
    drivers = {}

    for event in events:
        key = event.identity_key
        if not key:
            continue

        if key not in products:
            products[key] = _new_product(event)
            drivers[key] = []

        if isinstance(event, DriverObservation):
            products[key] = _overwrite(products[key], event, _DRIVER_SCALARS)
            if event.entry is not None:
                drivers[key].append(event.entry)
        elif isinstance(event, FirmwareUpdate):
            products[key] = _overwrite(products[key], event, _FIRMWARE_SCALARS)
        else:
            logger.warning("Ignoring unknown event type %s", type(event).__name__)

    return Catalog(replace(p, drivers=tuple(drivers[k])) for k, p in products.items())


def build_catalog(sheet_rows, aliases=None):
    """
    Run the whole normalization pipeline over already-fetched sheets.

    Args:
        sheet_rows: Sequence of (SheetConfig, rows) in processing order
        aliases: Optional override of config.FIELD_ALIASES

    Returns:
        Catalog

    Examples:
        >>> from loaders.config import SheetConfig
        >>> rows = [{'Description': 'QAT', 'OS': 'RHEL 9', 'Driver': '1.0'}]
        >>> cat = build_catalog([(SheetConfig('RHEL'), rows)])
        >>> cat.get('QAT').drivers[0].version
        '1.0'
    """
    events = []
    for sheet, rows in sheet_rows:
        # classify_rows starts a fresh fill-down state per sheet
        events.extend(classify_rows(sheet, rows or [], aliases))
    catalog = aggregate(events)
    logger.info("Aggregated %d events into %d products", len(events), len(catalog))
    return catalog
