"""Tests for aggregation into a Catalog and the full normalization pipeline."""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from loaders.aggregator import aggregate, build_catalog
from loaders.config import SheetConfig, WIDE
from loaders.row_classifier import DriverObservation, FirmwareUpdate
from models.catalog import Catalog, DriverEntry, Product


def observe(key, os_name, version='1.0', **scalars):
    return DriverObservation(identity_key=key, display_name=key,
                             entry=DriverEntry(os=os_name, version=version), **scalars)


class TestAggregate:

    def test_merge_by_identity(self):
        catalog = aggregate([observe('QAT', 'RHEL 9'), observe('QAT', 'Windows 2022')])
        assert len(catalog) == 1
        assert len(catalog.get('QAT').drivers) == 2

    def test_defaults_for_new_product(self):
        product = aggregate([observe('QAT', 'RHEL 9')]).get('QAT')
        assert product.brand == 'Generic'
        assert product.category == 'N/A'
        assert product.firmware_version == 'N/A'
        assert product.status == ''
        assert product.identifier == ''

    def test_first_appearance_order(self):
        events = [observe('B', 'x'), observe('A', 'x'), observe('B', 'y'), observe('C', 'x')]
        assert [p.identity_key for p in aggregate(events)] == ['B', 'A', 'C']

    def test_drivers_keep_encounter_order(self):
        events = [observe('QAT', 'Windows'), observe('QAT', 'ESXi'), observe('QAT', 'RHEL')]
        assert [d.os for d in aggregate(events).get('QAT').drivers] == ['Windows', 'ESXi', 'RHEL']

    def test_duplicate_entries_are_kept(self):
        events = [observe('QAT', 'RHEL 9', '1.0'), observe('QAT', 'RHEL 9', '1.0')]
        assert len(aggregate(events).get('QAT').drivers) == 2

    def test_scalar_fields_last_write_wins(self):
        events = [
            observe('QAT', 'RHEL', brand='Intel', category='Chipset', status='Beta'),
            observe('QAT', 'ESXi', brand='Intel Corp', status='Released'),
        ]
        product = aggregate(events).get('QAT')
        assert product.brand == 'Intel Corp'
        assert product.status == 'Released'
        # Empty values do not clobber
        assert product.category == 'Chipset'

    def test_firmware_update_never_adds_drivers(self):
        events = [
            observe('X710', 'RHEL 9'),
            FirmwareUpdate(identity_key='X710', display_name='X710', firmware='9.40'),
        ]
        product = aggregate(events).get('X710')
        assert product.firmware_version == '9.40'
        assert len(product.drivers) == 1

    def test_firmware_update_creates_product(self):
        events = [FirmwareUpdate(identity_key='E810', display_name='E810', firmware='4.2',
                                 identifier='S-1', status='EOL', brand='Intel', category='Network')]
        product = aggregate(events).get('E810')
        assert product.drivers == ()
        assert (product.firmware_version, product.identifier, product.status) == ('4.2', 'S-1', 'EOL')
        assert (product.brand, product.category) == ('Intel', 'Network')

    def test_firmware_update_before_drivers(self):
        events = [
            FirmwareUpdate(identity_key='X710', display_name='X710', firmware='9.40'),
            observe('X710', 'RHEL 9'),
        ]
        product = aggregate(events).get('X710')
        assert product.firmware_version == '9.40'
        assert len(product.drivers) == 1

    def test_firmware_update_keeps_existing_id_when_empty(self):
        events = [
            observe('X710', 'RHEL 9', identifier='S-1', status='Released'),
            FirmwareUpdate(identity_key='X710', display_name='X710', firmware='9.40'),
        ]
        product = aggregate(events).get('X710')
        assert (product.identifier, product.status) == ('S-1', 'Released')

    def test_driverless_observation_creates_product(self):
        events = [DriverObservation(identity_key='L40S', display_name='L40S', entry=None, brand='NVIDIA')]
        product = aggregate(events).get('L40S')
        assert product.drivers == ()
        assert product.brand == 'NVIDIA'

    def test_empty_input(self):
        catalog = aggregate([])
        assert isinstance(catalog, Catalog)
        assert len(catalog) == 0


class TestCatalogExport:

    def test_drivers_sorted_by_os_at_export(self):
        events = [observe('QAT', 'Windows'), observe('QAT', 'ESXi'), observe('QAT', 'RHEL')]
        catalog = aggregate(events)
        exported = catalog.to_ordered_list()[0]
        assert [d.os for d in exported.drivers] == ['ESXi', 'RHEL', 'Windows']
        # Catalog itself keeps encounter order
        assert [d.os for d in catalog.get('QAT').drivers] == ['Windows', 'ESXi', 'RHEL']

    def test_sort_is_case_sensitive(self):
        catalog = aggregate([observe('QAT', 'esxi'), observe('QAT', 'RHEL'), observe('QAT', 'ESXi')])
        assert [d.os for d in catalog.to_ordered_list()[0].drivers] == ['ESXi', 'RHEL', 'esxi']

    def test_export_is_idempotent(self):
        catalog = aggregate([observe('QAT', 'b', '1'), observe('QAT', 'a', '2'), observe('QAT', 'a', '1')])
        first = catalog.to_ordered_list()
        second = catalog.to_ordered_list()
        assert first == second
        assert [d.version for d in first[0].drivers] == ['2', '1', '1']

    def test_to_dicts(self):
        catalog = Catalog([Product('QAT', 'QAT', drivers=(DriverEntry('RHEL', '1', model='RX2530 M7'),))])
        data = catalog.to_dicts()[0]
        assert data['identity_key'] == 'QAT'
        assert data['drivers'] == [{'os': 'RHEL', 'version': '1', 'model': 'RX2530 M7'}]
        assert Product.from_dict(data) == catalog.to_ordered_list()[0]


class TestBuildCatalog:

    def test_end_to_end_wide_row(self):
        sheet = SheetConfig('Matrix', mode=WIDE, model_columns=('RX2530_M7', 'RX2540_M7'))
        rows = [{
            'Description': 'QAT', 'Vendor': 'Intel', 'Component': 'Chipset',
            'Operating_System': 'Windows Server 2022', 'RX2530_M7': '2.5.0', 'RX2540_M7': 'n/a',
        }]
        products = build_catalog([(sheet, rows)]).to_ordered_list()
        assert len(products) == 1
        qat = products[0]
        assert qat.display_name == 'QAT'
        assert qat.brand == 'Intel'
        assert qat.category == 'Chipset'
        assert [d.to_dict() for d in qat.drivers] == [
            {'os': 'Windows Server 2022', 'model': 'RX2530 M7', 'version': '2.5.0'}
        ]

    def test_wide_row_without_versions_keeps_product(self):
        sheet = SheetConfig('Matrix', mode=WIDE, model_columns=('RX2530_M7', 'RX2540_M7'))
        rows = [{
            'Description': 'L40S', 'Vendor': 'NVIDIA', 'Component': 'GPU',
            'FW Version': '95.02', 'RX2530_M7': 'n/a', 'RX2540_M7': '',
        }]
        products = build_catalog([(sheet, rows)]).to_ordered_list()
        assert len(products) == 1
        l40s = products[0]
        assert l40s.drivers == ()
        assert (l40s.brand, l40s.category, l40s.firmware_version) == ('NVIDIA', 'GPU', '95.02')

    def test_fill_down_resets_between_sheets(self):
        sheet_one = [{'Description': 'A', 'Vendor': 'Intel', 'Component': 'Network'}]
        sheet_two = [{'Description': 'B', 'Vendor': '', 'Component': ''}]
        catalog = build_catalog([(SheetConfig('Windows'), sheet_one), (SheetConfig('RHEL'), sheet_two)])
        b = catalog.get('B')
        assert b.brand == 'Generic'
        assert b.category == 'N/A'

    def test_same_description_across_sheets_merges(self):
        windows = [{'Description': 'QAT ', 'Vendor': 'Intel', 'Driver': '2.5'}]
        rhel = [{'Description': ' QAT', 'Vendor': 'Intel', 'Driver': '23.08'}]
        catalog = build_catalog([(SheetConfig('Windows'), windows), (SheetConfig('RHEL'), rhel)])
        assert len(catalog) == 1
        assert [d.os for d in catalog.get('QAT').drivers] == ['Windows', 'RHEL']

    def test_firmware_sheet_only_sets_firmware(self):
        rhel = [{'Description': 'X710', 'Vendor': 'Intel', 'Driver': '2.20'}]
        fw = [{'Description': 'X710', 'FW Version': '9.40'}]
        catalog = build_catalog([(SheetConfig('RHEL'), rhel), (SheetConfig('FW', firmware=True), fw)])
        x710 = catalog.get('X710')
        assert x710.firmware_version == '9.40'
        assert [d.version for d in x710.drivers] == ['2.20']

    def test_mixed_tall_and_wide(self):
        wide = SheetConfig('Matrix', mode=WIDE, model_columns=('RX2530_M7',))
        catalog = build_catalog([
            (SheetConfig('ESXi'), [{'Description': 'QAT', 'Vendor': 'Intel', 'Driver': '1.0'}]),
            (wide, [{'Description': 'QAT', 'Vendor': 'Intel', 'OS': 'RHEL 9', 'RX2530_M7': '2.0'}]),
        ])
        drivers = catalog.to_ordered_list()[0].drivers
        assert [(d.os, d.model, d.version) for d in drivers] == [
            ('ESXi', None, '1.0'), ('RHEL 9', 'RX2530 M7', '2.0')
        ]

    def test_identity_ignores_vendor(self):
        rows = [
            {'Description': 'Adapter', 'Vendor': 'Intel', 'Driver': '1'},
            {'Description': 'Adapter', 'Vendor': 'Broadcom', 'Driver': '2'},
        ]
        catalog = build_catalog([(SheetConfig('Windows'), rows)])
        assert len(catalog) == 1
        assert catalog.get('Adapter').brand == 'Broadcom'

    def test_empty_sheet_rows(self):
        catalog = build_catalog([(SheetConfig('Windows'), []), (SheetConfig('RHEL'), None)])
        assert len(catalog) == 0
