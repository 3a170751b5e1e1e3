from .catalog import Catalog, Product, DriverEntry
from .database import Base, ProductRecord, CatalogSnapshot, get_engine, get_session_factory

__all__ = [
    'Catalog', 'Product', 'DriverEntry',
    'Base', 'ProductRecord', 'CatalogSnapshot', 'get_engine', 'get_session_factory',
]
