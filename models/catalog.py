"""
Catalog value types handed from the loaders to the view layer.

Products are immutable snapshots. Drivers keep row encounter order inside the
Catalog and are only sorted by OS name when the catalog is exported, so
exporting an unchanged catalog any number of times gives the same result.
"""

from dataclasses import dataclass, field, replace, asdict
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class DriverEntry:
    os: str
    version: str
    model: Optional[str] = None

    def to_dict(self):
        data = {'os': self.os, 'version': self.version}
        if self.model is not None:
            data['model'] = self.model
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(os=data.get('os', ''), version=data.get('version', ''), model=data.get('model'))


@dataclass(frozen=True)
class Product:
    identity_key: str
    display_name: str
    brand: str = 'Generic'
    category: str = 'N/A'
    status: str = ''
    form_factor: str = ''
    firmware_version: str = 'N/A'
    spec: str = ''
    identifier: str = ''
    drivers: Tuple[DriverEntry, ...] = field(default_factory=tuple)

    @property
    def os_list(self):
        """OS names of all driver entries, in stored order."""
        return [d.os for d in self.drivers]

    def to_dict(self):
        data = asdict(self)
        data['drivers'] = [d.to_dict() for d in self.drivers]
        return data

    @classmethod
    def from_dict(cls, data):
        values = dict(data)
        values['drivers'] = tuple(DriverEntry.from_dict(d) for d in values.get('drivers') or [])
        return cls(**values)


def sort_drivers(drivers: Iterable[DriverEntry]) -> Tuple[DriverEntry, ...]:
    """Stable sort by OS name, case-sensitive."""
    return tuple(sorted(drivers, key=lambda d: d.os))


class Catalog:
    """
    Ordered, read-only collection of products.

    Order is first appearance of each identity key across the concatenated
    row stream.

    Examples:
        >>> cat = Catalog([Product('QAT', 'QAT')])
        >>> len(cat)
        1
        >>> cat.get('QAT').brand
        'Generic'
    """

    def __init__(self, products: Iterable[Product] = ()):
        self._products: Tuple[Product, ...] = tuple(products)
        self._index = {p.identity_key: p for p in self._products}

    def __len__(self):
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

    def __contains__(self, identity_key):
        return identity_key in self._index

    def __repr__(self):
        return f"<Catalog {len(self._products)} products>"

    def get(self, identity_key) -> Optional[Product]:
        return self._index.get(identity_key)

    def to_ordered_list(self) -> List[Product]:
        """Products in catalog order, each with drivers sorted by OS."""
        return [replace(p, drivers=sort_drivers(p.drivers)) for p in self._products]

    def to_dicts(self):
        return [p.to_dict() for p in self.to_ordered_list()]
