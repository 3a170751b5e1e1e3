"""
Main loading orchestration for the driver catalog.

This module coordinates the entire data loading pipeline:
    1. Fetch every configured sheet concurrently (or read a local workbook)
    2. Wait for all of them; a failed sheet contributes zero rows
    3. Classify and aggregate the rows sheet by sheet, in configured order
    4. Return a LoadResult holding the Catalog and a status message

If every sheet fails, or the pipeline itself raises, the built-in sample
catalog is returned instead so the UI stays usable.

Functions:
    fetch_sheet: GET one sheet's rows from the JSON API
    fetch_all_sheets: Fetch all sheets concurrently and join
    read_workbook: Read sheets from a local .xlsx export
    load_catalog: Main entry point
"""

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd
import requests

from models.catalog import Catalog, DriverEntry, Product

from .aggregator import build_catalog
from .config import (
    SHEETS, SPREADSHEET_ID, SHEET_API_BASE, REQUEST_TIMEOUT,
    MAX_FETCH_WORKERS, WORKBOOK_FILE,
)

# Suppress openpyxl warnings about styles/formatting (we only read data values)
warnings.filterwarnings('ignore', category=UserWarning, module='openpyxl')

logger = logging.getLogger(__name__)


@dataclass
class SheetResult:
    name: str
    rows: List[dict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


@dataclass
class LoadResult:
    catalog: Catalog
    message: str
    is_sample: bool = False
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sheets: List[SheetResult] = field(default_factory=list)


SAMPLE_CATALOG = Catalog([
    Product(
        identity_key='Intel QAT 8970',
        display_name='Intel QAT 8970',
        brand='Intel',
        category='Chipset',
        status='Released',
        firmware_version='N/A',
        drivers=(
            DriverEntry(os='Windows Server 2022', version='2.5.0'),
            DriverEntry(os='RHEL 9.2', version='23.08'),
        ),
    ),
    Product(
        identity_key='Broadcom 57414 25GbE',
        display_name='Broadcom 57414 25GbE',
        brand='Broadcom',
        category='Network',
        form_factor='OCP',
        firmware_version='227.0.134.0',
        drivers=(
            DriverEntry(os='ESXi 8.0', version='227.0.129.0'),
        ),
    ),
    Product(
        identity_key='NVIDIA L40S',
        display_name='NVIDIA L40S',
        brand='NVIDIA',
        category='GPU',
        drivers=(
            DriverEntry(os='Windows Server 2022', model='RX2540 M7', version='538.15'),
        ),
    ),
])


def sheet_url(sheet_name, spreadsheet_id=SPREADSHEET_ID, base_url=SHEET_API_BASE):
    return f"{base_url.rstrip('/')}/{spreadsheet_id}/{sheet_name}"


def fetch_sheet(sheet_name, session=None, spreadsheet_id=SPREADSHEET_ID,
                base_url=SHEET_API_BASE, timeout=REQUEST_TIMEOUT):
    """
    Fetch one sheet from the spreadsheet JSON API.

    Never raises: network errors, non-2xx responses, invalid JSON and
    payloads that are not a JSON array all produce an empty SheetResult
    carrying the error text.
    """
    url = sheet_url(sheet_name, spreadsheet_id, base_url)
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Fetching sheet '%s' failed: %s", sheet_name, e)
        return SheetResult(sheet_name, [], str(e))

    if not isinstance(data, list):
        logger.warning("Sheet '%s' did not return a JSON array (%s)", sheet_name, type(data).__name__)
        return SheetResult(sheet_name, [], f"unexpected payload type {type(data).__name__}")

    rows = [row for row in data if isinstance(row, dict)]
    logger.info("Fetched %d rows from sheet '%s'", len(rows), sheet_name)
    return SheetResult(sheet_name, rows)


def fetch_all_sheets(sheets=None, max_workers=MAX_FETCH_WORKERS, **fetch_kwargs):
    """
    Fetch every sheet concurrently and wait for all of them.

    Results come back in configured sheet order regardless of completion
    order. Each fetch opens its own connection; requests.Session is not
    shared across worker threads.
    """
    sheets = SHEETS if sheets is None else sheets
    if not sheets:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(sheets)))) as executor:
        futures = [
            executor.submit(fetch_sheet, sheet.name, **fetch_kwargs)
            for sheet in sheets
        ]
        return [future.result() for future in futures]


def read_workbook(path, sheets=None):
    """
    Read configured sheets from a local .xlsx export.

    Every cell is read as text; blank cells become ''. Sheets missing from
    the workbook come back as failed, empty results.
    """
    sheets = SHEETS if sheets is None else sheets
    try:
        frames = pd.read_excel(path, sheet_name=None, dtype=str, keep_default_na=False, engine='openpyxl')
    except (OSError, ValueError) as e:
        logger.error("Could not read workbook %s: %s", path, e)
        return [SheetResult(sheet.name, [], str(e)) for sheet in sheets]

    results = []
    for sheet in sheets:
        if sheet.name not in frames:
            logger.warning("Sheet '%s' not found in %s, skipping", sheet.name, path)
            results.append(SheetResult(sheet.name, [], 'sheet not found'))
            continue
        df = frames[sheet.name].fillna('')
        df.columns = [str(c).strip() for c in df.columns]
        rows = df.to_dict('records')
        logger.info("Read %d rows from sheet '%s'", len(rows), sheet.name)
        results.append(SheetResult(sheet.name, rows))
    return results


def _sample_result(message, sheets=None):
    logger.error("%s; falling back to sample data", message)
    return LoadResult(
        catalog=SAMPLE_CATALOG,
        message=f"{message}. Showing sample data.",
        is_sample=True,
        sheets=sheets or [],
    )


def load_catalog(sheets=None, workbook=WORKBOOK_FILE, aliases=None, **fetch_kwargs):
    """
    Load and normalize the driver catalog.

    Args:
        sheets: SheetConfig list (defaults to config.SHEETS)
        workbook: Path to a local .xlsx to read instead of the API
        aliases: Optional override of config.FIELD_ALIASES
        **fetch_kwargs: Passed through to fetch_sheet (timeout, base_url, ...)

    Returns:
        LoadResult whose message reads e.g. "Loaded 42 products from 6 sheets."
    """
    sheets = SHEETS if sheets is None else sheets
    try:
        if workbook:
            results = read_workbook(workbook, sheets)
        else:
            results = fetch_all_sheets(sheets, **fetch_kwargs)
    except Exception as e:
        return _sample_result(f"Loading sheets failed: {e}")

    if results and not any(r.ok for r in results):
        return _sample_result("No sheet could be loaded", results)

    try:
        catalog = build_catalog(zip(sheets, [r.rows for r in results]), aliases)
    except Exception as e:
        logger.exception("Normalizing sheet data failed")
        return _sample_result(f"Processing sheet data failed: {e}", results)

    failed = [r.name for r in results if not r.ok]
    message = f"Loaded {len(catalog)} products from {len(results) - len(failed)} sheets."
    if failed:
        message += f" Unavailable: {', '.join(failed)}."
    logger.info(message)
    return LoadResult(catalog=catalog, message=message, sheets=results)


if __name__ == "__main__":
    from .log import setup_logging

    setup_logging()
    result = load_catalog()
    print(result.message)
    for product in result.catalog.to_ordered_list()[:5]:
        print(f"  {product.display_name} ({product.brand}): {len(product.drivers)} drivers")
