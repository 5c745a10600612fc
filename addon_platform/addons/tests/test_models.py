"""
Tests for addon records
"""

from django.test import TestCase

from addon_platform.addons.models import AddonRecord
from addon_platform.addons.registry import AddonRegistry

from .utils import HookRecorder, make_package


class AddonRecordSyncTestCase(TestCase):
    """Test AddonRecord.objects.sync_from_registry"""

    def setUp(self):
        self.registry = AddonRegistry()
        self.registry.register(make_package(
            'crm', version='1.1.0', display_label='CRM', models=('Contact', 'Opportunity')
        ))
        self.registry.register(make_package(
            'hr',
            display_label='Human Resources',
            dependencies=('crm',),
            initialize=HookRecorder().hook('init', 'hr', RuntimeError('no leave types')),
        ))

    def test_sync_creates_records(self):
        """Test that every registered module gets a record"""
        records = AddonRecord.objects.sync_from_registry(self.registry)

        self.assertEqual([record.name for record in records], ['crm', 'hr'])
        crm = AddonRecord.objects.get(name='crm')
        self.assertEqual(crm.display_label, 'CRM')
        self.assertEqual(crm.version, '1.1.0')
        self.assertEqual(crm.model_names, ['Contact', 'Opportunity'])
        self.assertEqual(crm.status, 'registered')
        self.assertFalse(crm.active)
        self.assertTrue(crm.installed)
        self.assertIsNotNone(crm.installed_at)
        self.assertEqual(AddonRecord.objects.get(name='hr').dependencies, ['crm'])

    def test_sync_reflects_lifecycle(self):
        self.registry.activate_all()

        AddonRecord.objects.sync_from_registry(self.registry)

        crm = AddonRecord.objects.get(name='crm')
        hr = AddonRecord.objects.get(name='hr')
        self.assertTrue(crm.active)
        self.assertEqual(crm.status, 'active')
        self.assertFalse(hr.active)
        self.assertEqual(hr.status, 'failed')
        self.assertIn('no leave types', hr.last_error)
        self.assertEqual(list(AddonRecord.objects.active()), [crm])

    def test_sync_updates_existing_records(self):
        """Test that syncing twice keeps one record per module"""
        AddonRecord.objects.sync_from_registry(self.registry)
        installed_at = AddonRecord.objects.get(name='crm').installed_at
        self.registry.activate_all()

        AddonRecord.objects.sync_from_registry(self.registry)

        self.assertEqual(AddonRecord.objects.count(), 2)
        crm = AddonRecord.objects.get(name='crm')
        self.assertEqual(crm.status, 'active')
        self.assertEqual(crm.installed_at, installed_at)

    def test_sync_marks_removed_modules(self):
        self.registry.activate_all()
        AddonRecord.objects.sync_from_registry(self.registry)

        self.registry.unregister('crm')
        records = AddonRecord.objects.sync_from_registry(self.registry)

        self.assertEqual([record.name for record in records], ['hr'])
        crm = AddonRecord.objects.get(name='crm')
        self.assertFalse(crm.active)
        self.assertEqual(crm.status, 'unregistered')

    def test_str(self):
        AddonRecord.objects.sync_from_registry(self.registry)

        self.assertEqual(str(AddonRecord.objects.get(name='crm')), 'CRM (crm@1.1.0)')

    def test_ordering_by_label(self):
        AddonRecord.objects.sync_from_registry(self.registry)

        self.assertEqual(
            list(AddonRecord.objects.values_list('name', flat=True)), ['crm', 'hr']
        )
