from sqlalchemy import create_engine, Column, String, Integer, Boolean, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base, sessionmaker

from .catalog import Product, DriverEntry

Base = declarative_base()


class ProductRecord(Base):
    __tablename__ = 'products'

    identity_key = Column(String, primary_key=True)
    position = Column(Integer, index=True)   # catalog order
    display_name = Column(String)
    brand = Column(String, index=True)
    category = Column(String, index=True)
    status = Column(String)
    form_factor = Column(String, index=True)
    firmware_version = Column(String)
    spec = Column(Text)
    identifier = Column(String)

    # Driver entries in aggregation order: [{'os': ..., 'version': ..., 'model': ...}]
    drivers = Column(JSON)

    @classmethod
    def from_product(cls, product, position):
        return cls(
            identity_key=product.identity_key,
            position=position,
            display_name=product.display_name,
            brand=product.brand,
            category=product.category,
            status=product.status,
            form_factor=product.form_factor,
            firmware_version=product.firmware_version,
            spec=product.spec,
            identifier=product.identifier,
            drivers=[d.to_dict() for d in product.drivers],
        )

    def to_product(self):
        return Product(
            identity_key=self.identity_key,
            display_name=self.display_name or self.identity_key,
            brand=self.brand or '',
            category=self.category or '',
            status=self.status or '',
            form_factor=self.form_factor or '',
            firmware_version=self.firmware_version or '',
            spec=self.spec or '',
            identifier=self.identifier or '',
            drivers=tuple(DriverEntry.from_dict(d) for d in self.drivers or []),
        )


class CatalogSnapshot(Base):
    __tablename__ = 'catalog_snapshot'

    id = Column(Integer, primary_key=True)
    tree = Column(JSON)                 # Sidebar tree
    message = Column(Text)              # Status line shown to the user
    is_sample = Column(Boolean, default=False)
    loaded_at = Column(DateTime)


def get_engine(db_url=None):
    if db_url is None:
        from loaders.config import DATABASE_URL
        db_url = DATABASE_URL
    return create_engine(db_url)


def get_session_factory(engine):
    return sessionmaker(bind=engine)
