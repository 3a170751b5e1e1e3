"""
Sheet loaders for the hardware driver catalog.

This package fetches inventory sheets, normalizes their loosely-shaped rows
(header synonyms, merged cells, tall and wide layouts) and aggregates them
into a Catalog for storage and display.

Architecture:
    sheets → field_resolver + fill_down → row_classifier → aggregator → Catalog

Modules:
    config: Sheets, header synonyms, connection settings
    field_resolver: Header-synonym lookup
    fill_down: Merged-cell forward fill
    row_classifier: Tall / wide row classification
    aggregator: Identity-keyed merge into a Catalog
    sheet_loader: Fetching and orchestration
    data_transformer: Sidebar tree, search and display helpers
"""

from .sheet_loader import load_catalog, LoadResult
from .aggregator import aggregate, build_catalog
from .data_transformer import build_sidebar_tree, filter_products

__all__ = [
    'load_catalog', 'LoadResult', 'aggregate', 'build_catalog',
    'build_sidebar_tree', 'filter_products',
]
