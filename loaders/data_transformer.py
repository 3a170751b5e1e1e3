"""
View-side transformations over catalog products.

These helpers turn a list of Products into the shapes the UI consumes and
implement the free-text filter. They never mutate products.

Functions:
    build_sidebar_tree: Group products into the sidebar navigation tree
    product_matches: Free-text search predicate
    filter_products: Apply product_matches to a list
    short_os_label: Compact OS name for badges
    brand_color: Badge colour for a vendor
"""

from .config import DEFAULT_FORM_FACTOR

NETWORK_GROUP = 'Network'

BRAND_COLORS = [
    ('nvidia', '#76B900'),
    ('amd', '#ED1C24'),
    ('intel', '#0068B5'),
    ('broadcom', '#D93025'),
]
DEFAULT_BRAND_COLOR = '#555'


def _get_or_create_node(level, kind, name):
    for node in level:
        if node.get('kind') == kind and node['name'] == name:
            return node
    node = {'name': name, 'kind': kind, 'children': []}
    level.append(node)
    return node


def is_network(product):
    return product.category.strip().lower() == 'network'


def build_sidebar_tree(products):
    """
    Build the sidebar navigation tree.

    Network products are grouped form factor -> 'Network' -> brand -> product,
    with 'PCIE' as the form factor when none is known. Everything else is
    brand -> product. Groups appear in order of first use. Group nodes carry a
    kind ('form_factor', 'group' or 'brand'), so a brand and a form factor
    with the same name stay separate.

    Returns a nested list:
    [
      {'name': 'Intel', 'kind': 'brand', 'children': [
          {'name': 'QAT', 'key': 'QAT'}
      ]},
      {'name': 'OCP', 'kind': 'form_factor', 'children': [
          {'name': 'Network', 'kind': 'group', 'children': [
              {'name': 'Broadcom', 'kind': 'brand', 'children': [
                  {'name': 'Broadcom 57414', 'key': 'Broadcom 57414'}
              ]}
          ]}
      ]}
    ]
    """
    tree = []
    for product in products:
        if is_network(product):
            form_factor = product.form_factor or DEFAULT_FORM_FACTOR
            path = [('form_factor', form_factor), ('group', NETWORK_GROUP), ('brand', product.brand)]
        else:
            path = [('brand', product.brand)]

        level = tree
        for kind, name in path:
            level = _get_or_create_node(level, kind, name)['children']
        level.append({'name': product.display_name, 'key': product.identity_key})
    return tree


def _search_fields(product):
    yield product.display_name
    yield product.brand
    yield product.category
    yield product.form_factor
    for driver in product.drivers:
        yield driver.os
        yield driver.model or ''
        yield driver.version
    yield ', '.join(product.os_list)


def product_matches(product, query):
    """
    Case-insensitive substring match over name, brand, category, form factor,
    every driver's OS/model/version and the joined OS list. An empty query
    matches everything.

    Examples:
        >>> from models.catalog import Product, DriverEntry
        >>> p = Product('QAT', 'QAT', drivers=(DriverEntry('RHEL 9', '1.0'),))
        >>> product_matches(p, 'rhel')
        True
    """
    needle = (query or '').strip().lower()
    if not needle:
        return True
    return any(needle in (text or '').lower() for text in _search_fields(product))


def filter_products(products, query):
    return [p for p in products if product_matches(p, query)]


def short_os_label(os_name):
    """
    Examples:
        >>> short_os_label('Microsoft Windows Server 2022')
        'Windows Server 2022'
        >>> short_os_label('Red Hat Enterprise Linux 9.2 for x86_64')
        'Red Hat'
    """
    label = os_name.replace('Microsoft', '').replace('Enterprise', '').strip()
    label = ' '.join(label.split())
    if len(label) > 20:
        label = ' '.join(label.split(' ')[:2])
    return label


def brand_color(brand):
    if not brand:
        return DEFAULT_BRAND_COLOR
    lowered = brand.lower()
    for needle, color in BRAND_COLORS:
        if needle in lowered:
            return color
    return DEFAULT_BRAND_COLOR
