"""
Tests for addon discovery and loading
"""

import sys
import types
from pathlib import Path
from unittest.mock import patch

from django.test import SimpleTestCase

from addon_platform.addons.base import ModuleDescriptor, ModulePackage
from addon_platform.addons.exceptions import InvalidModuleDescriptor
from addon_platform.addons.loader import AddonLoader

from .utils import make_package

FIXTURE_ADDONS = Path(__file__).parent / 'fixtures' / 'addons'


class DiscoveryTestCase(SimpleTestCase):
    """Test finding addons"""

    def test_search_path_addons(self):
        """Test that only directories with a manifest and __init__.py are addons"""
        loader = AddonLoader(search_paths=[FIXTURE_ADDONS])

        self.assertEqual(
            loader.discover(),
            ['broken_addon', 'notes_addon', 'orphan_addon', 'tasks_addon'],
        )
        self.assertIn(str(FIXTURE_ADDONS.resolve()), sys.path)

    def test_configured_packages_first_without_duplicates(self):
        loader = AddonLoader(
            packages=['tasks_addon', 'business_addons.crm'], search_paths=[FIXTURE_ADDONS]
        )

        discovered = loader.discover()

        self.assertEqual(discovered[:2], ['tasks_addon', 'business_addons.crm'])
        self.assertEqual(discovered.count('tasks_addon'), 1)

    def test_missing_search_path(self):
        with self.assertLogs('addon_platform.addons.loader', level='WARNING'):
            loader = AddonLoader(search_paths=[FIXTURE_ADDONS / 'does-not-exist'])

        self.assertEqual(loader.search_paths, [])

    @patch('addon_platform.addons.loader.entry_points')
    def test_entry_points(self, mock_entry_points):
        mock_entry_points.return_value = [
            types.SimpleNamespace(name='notes', value='notes_addon'),
            types.SimpleNamespace(name='crm', value='business_addons.crm:package'),
        ]
        loader = AddonLoader(packages=['business_addons.crm'], entry_point_group='test.addons')

        self.assertEqual(loader.discover(), ['business_addons.crm', 'notes_addon'])
        mock_entry_points.assert_called_once_with(group='test.addons')

    @patch('addon_platform.addons.loader.entry_points')
    def test_entry_points_disabled(self, mock_entry_points):
        AddonLoader(entry_point_group=None).discover()

        mock_entry_points.assert_not_called()

    @patch('addon_platform.addons.loader.entry_points', side_effect=TypeError('unexpected keyword'))
    def test_entry_points_failure_is_recorded(self, mock_entry_points):
        """Test that a broken entry point lookup keeps the other addons"""
        loader = AddonLoader(packages=['business_addons.crm'], entry_point_group='test.addons')

        with self.assertLogs('addon_platform.addons.loader', level='ERROR'):
            packages = loader.load_all()

        self.assertEqual([package.name for package in packages], ['crm'])
        self.assertIsInstance(loader.errors['entry_points:test.addons'], TypeError)


class LoadPackageTestCase(SimpleTestCase):
    """Test importing one addon"""

    def setUp(self):
        self.loader = AddonLoader(search_paths=[FIXTURE_ADDONS])

    def test_exported_package(self):
        package = self.loader.load_package('business_addons.crm')

        self.assertEqual(package.name, 'crm')
        self.assertIn('ContactsView', package.components)

    def test_assembled_from_manifest_file(self):
        """Test assembling a package from manifest.yaml and exported hooks"""
        import notes_addon
        from notes_addon.views import notes

        package = self.loader.load_package('notes_addon')

        self.assertEqual(package.name, 'notes')
        self.assertEqual(package.version, '0.2.0')
        self.assertIs(package.components['NotesView'], notes)
        self.assertIs(package.initialize, notes_addon.initialize)
        self.assertIs(package.cleanup, notes_addon.cleanup)
        self.assertEqual(package.menus[0].sequence, 60)

    def test_exported_routes_and_components_win(self):
        """Test that module-level routes, components and menus are used"""
        import tasks_addon

        package = self.loader.load_package('tasks_addon')

        self.assertEqual(package.name, 'tasks')
        self.assertEqual(package.descriptor.dependencies, ('notes',))
        self.assertEqual(package.route_fragment[0].view_id, 'TaskListView')
        self.assertIs(package.components['TaskListView'], tasks_addon.task_list)
        self.assertEqual(package.menus[0].id, 'tasks')
        self.assertIsNone(package.initialize())

    def test_unresolvable_component(self):
        with self.assertRaises(InvalidModuleDescriptor):
            self.loader.load_package('broken_addon')

    def test_exported_descriptor(self):
        module = types.ModuleType('descriptor_addon')
        module.__file__ = str(FIXTURE_ADDONS / 'descriptor_addon' / '__init__.py')
        module.manifest = ModuleDescriptor(name='descriptor')
        module.components = {'DescriptorView': object()}

        with patch.dict(sys.modules, {'descriptor_addon': module}):
            package = self.loader.load_package('descriptor_addon')

        self.assertEqual(package.name, 'descriptor')
        self.assertEqual(list(package.components), ['DescriptorView'])

    def test_invalid_package_export(self):
        module = types.ModuleType('bad_export_addon')
        module.package = {'name': 'bad'}

        with patch.dict(sys.modules, {'bad_export_addon': module}):
            with self.assertRaises(InvalidModuleDescriptor):
                self.loader.load_package('bad_export_addon')

    def test_no_manifest(self):
        with self.assertRaises(InvalidModuleDescriptor):
            self.loader.load_package('no_manifest_addon')

    def test_import_error(self):
        with self.assertRaises(ImportError):
            self.loader.load_package('no_such_addon_anywhere')


class LoadAllTestCase(SimpleTestCase):
    """Test loading every discovered addon"""

    def test_load_all(self):
        """Test that failures are collected and dependencies come first"""
        loader = AddonLoader(packages=['tasks_addon'], search_paths=[FIXTURE_ADDONS])

        with self.assertLogs('addon_platform.addons.loader', level='WARNING') as logs:
            packages = loader.load_all()

        self.assertEqual([package.name for package in packages], ['notes', 'tasks'])
        self.assertEqual(list(loader.errors), ['broken_addon'])
        self.assertIsInstance(loader.errors['broken_addon'], InvalidModuleDescriptor)
        self.assertTrue(any('orphan' in line and 'accounting' in line for line in logs.output))

    def test_business_addons(self):
        loader = AddonLoader(packages=[
            'business_addons.project',
            'business_addons.crm',
            'business_addons.hr',
            'business_addons.inventory',
        ])

        packages = loader.load_all()

        self.assertEqual(
            [package.name for package in packages], ['crm', 'hr', 'inventory', 'project']
        )
        self.assertEqual(loader.errors, {})

    def test_drop_cascades(self):
        """Test that dependents of dropped addons are dropped too"""
        loader = AddonLoader()
        packages = [
            make_package('reports', dependencies=('sales',)),
            make_package('sales', dependencies=('accounting',)),
            make_package('crm'),
        ]

        with self.assertLogs('addon_platform.addons.loader', level='WARNING'):
            kept = loader._drop_unsatisfied(packages)

        self.assertEqual([package.name for package in kept], ['crm'])

    def test_sort_keeps_independent_order(self):
        loader = AddonLoader()
        packages = [
            make_package('project', dependencies=('crm',)),
            make_package('inventory'),
            make_package('crm'),
        ]

        ordered = loader._sort_by_dependencies(packages)

        self.assertEqual([package.name for package in ordered], ['inventory', 'crm', 'project'])

    def test_circular_dependencies(self):
        loader = AddonLoader()
        packages = [
            make_package('a', dependencies=('b',)),
            make_package('b', dependencies=('a',)),
        ]

        with self.assertLogs('addon_platform.addons.loader', level='WARNING'):
            ordered = loader._sort_by_dependencies(packages)

        self.assertEqual(ordered, packages)

    def test_from_settings(self):
        loader = AddonLoader.from_settings({
            'PACKAGES': ['business_addons.crm'],
            'PATHS': [str(FIXTURE_ADDONS)],
            'ENTRY_POINT_GROUP': None,
        })

        self.assertEqual(loader.packages, ['business_addons.crm'])
        self.assertEqual(loader.search_paths, [FIXTURE_ADDONS.resolve()])
        self.assertIsNone(loader.entry_point_group)


class BusinessAddonPackageTestCase(SimpleTestCase):

    def test_loaded_package_is_a_module_package(self):
        package = AddonLoader().load_package('business_addons.inventory')

        self.assertIsInstance(package, ModulePackage)
        self.assertEqual(package.version, '1.2.0')
