"""
Configuration constants for driver catalog loading.

This module centralizes the source sheets, header synonyms and connection
settings used during ingestion, so new sheets or renamed columns can be
absorbed without touching core logic.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

TALL = 'tall'
WIDE = 'wide'


@dataclass(frozen=True)
class SheetConfig:
    """One source sheet and how its rows are laid out."""
    name: str
    mode: str = TALL
    firmware: bool = False
    model_columns: Tuple[str, ...] = field(default_factory=tuple)


# Spreadsheet-backed JSON API (one GET per sheet)
SPREADSHEET_ID = os.environ.get('CATALOG_SPREADSHEET_ID', '1tJjquBs-Wyav4VEg7XF-BnTAGoWhE-5RFwwhU16GuwQ')
SHEET_API_BASE = os.environ.get('CATALOG_SHEET_API', 'https://opensheet.elk.sh')

_timeout = os.environ.get('CATALOG_REQUEST_TIMEOUT')
REQUEST_TIMEOUT: Optional[float] = float(_timeout) if _timeout else None
MAX_FETCH_WORKERS = 8

# Optional local .xlsx export, read instead of the API when set
WORKBOOK_FILE = os.environ.get('CATALOG_WORKBOOK')

DATABASE_URL = os.environ.get('CATALOG_DATABASE_URL', 'sqlite:///catalog.db')

# Server models scanned in wide sheets (header text, underscores allowed)
SERVER_MODELS = (
    'RX2530_M7', 'RX2540_M7', 'RX4770_M7',
    'TX2550_M7', 'RX1440_M2', 'RX2450_M2',
)

# Processed in this order; ties in catalog order are broken by it
SHEETS = [
    SheetConfig('Windows'),
    SheetConfig('RHEL'),
    SheetConfig('Oracle'),
    SheetConfig('ESXi'),
    SheetConfig('Matrix', mode=WIDE, model_columns=SERVER_MODELS),
    SheetConfig('FW', firmware=True),
]

# Logical field -> accepted header spellings, tried in order
FIELD_ALIASES = {
    'description': ['description', 'Description', 'Model Name'],
    'vendor': ['vendor', 'Vendor'],
    'component': ['component', 'Component'],
    'form_factor': ['FormFactor', 'Form Factor', 'formfactor'],
    'firmware': ['FW Version', 'FW', 'Firmware', 'FW_Version', 'Version'],
    'spec': ['Spec', 'Specifications', 'spec'],
    'swid': ['swid', 'SWID'],
    'status': ['status', 'Status'],
    'os': ['os', 'OS', 'Operating_System'],
    'driver': ['driver', 'Driver', 'Version'],
}

# Fields forward-filled across merged cells
STICKY_FIELDS = ('component', 'vendor', 'form_factor', 'firmware', 'spec')

# Defaults applied when a field never resolves
DEFAULT_BRAND = 'Generic'
DEFAULT_CATEGORY = 'N/A'
DEFAULT_FIRMWARE = 'N/A'
DEFAULT_DRIVER_VERSION = 'N/A'
DEFAULT_FORM_FACTOR = 'PCIE'

# Cell text treated as "no version" in wide sheets (compared lowercased)
NOT_APPLICABLE = 'n/a'
