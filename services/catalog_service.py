from sqlalchemy.orm import Session

from loaders.data_transformer import build_sidebar_tree, filter_products
from models import Catalog, ProductRecord, CatalogSnapshot

SNAPSHOT_ID = 1


class CatalogService:
    def __init__(self, session: Session):
        self.session = session

    def has_snapshot(self):
        return self.session.get(CatalogSnapshot, SNAPSHOT_ID) is not None

    def get_catalog(self):
        """Rebuilds the stored Catalog in its original order."""
        records = self.session.query(ProductRecord).order_by(ProductRecord.position).all()
        return Catalog(r.to_product() for r in records)

    def get_products(self):
        """Products in catalog order with drivers sorted by OS."""
        return self.get_catalog().to_ordered_list()

    def search(self, query):
        """Filters the stored catalog; never triggers a reload."""
        return filter_products(self.get_products(), query)

    def get_tree(self):
        snapshot = self.session.get(CatalogSnapshot, SNAPSHOT_ID)
        return snapshot.tree if snapshot and snapshot.tree else []

    def get_status(self):
        snapshot = self.session.get(CatalogSnapshot, SNAPSHOT_ID)
        if snapshot is None:
            return {'message': 'Catalog not loaded yet.', 'is_sample': False, 'loaded_at': None}
        return {
            'message': snapshot.message,
            'is_sample': bool(snapshot.is_sample),
            'loaded_at': snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
        }

    def replace(self, result):
        """
        Swaps in a freshly loaded catalog.

        The previous products and snapshot are removed in the same
        transaction, so readers see either the old catalog or the new one.
        """
        products = list(result.catalog)
        try:
            self.session.query(ProductRecord).delete()
            self.session.query(CatalogSnapshot).delete()
            for position, product in enumerate(products):
                self.session.add(ProductRecord.from_product(product, position))
            self.session.add(CatalogSnapshot(
                id=SNAPSHOT_ID,
                tree=build_sidebar_tree(products),
                message=result.message,
                is_sample=result.is_sample,
                loaded_at=result.loaded_at,
            ))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return len(products)
