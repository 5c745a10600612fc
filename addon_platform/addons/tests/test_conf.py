"""
Tests for addon settings
"""

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from addon_platform.addons.conf import DEFAULTS, get_addon_settings


class AddonSettingsTestCase(SimpleTestCase):
    """Test get_addon_settings"""

    @override_settings(ADDONS={'PACKAGES': ['business_addons.crm'], 'LIFECYCLE_TIMEOUT': 2.5})
    def test_merged_over_defaults(self):
        addon_settings = get_addon_settings()

        self.assertEqual(addon_settings['PACKAGES'], ['business_addons.crm'])
        self.assertEqual(addon_settings['LIFECYCLE_TIMEOUT'], 2.5)
        self.assertEqual(addon_settings['ENTRY_POINT_GROUP'], DEFAULTS['ENTRY_POINT_GROUP'])
        self.assertTrue(addon_settings['AUTO_ACTIVATE'])

    @override_settings(ADDONS=None)
    def test_missing_setting(self):
        self.assertEqual(get_addon_settings(), DEFAULTS)

    @override_settings(ADDONS={'PACKAGE': ['business_addons.crm']})
    def test_unknown_key(self):
        with self.assertRaisesMessage(ImproperlyConfigured, 'PACKAGE'):
            get_addon_settings()

    @override_settings(ADDONS=['business_addons.crm'])
    def test_not_a_dict(self):
        with self.assertRaises(ImproperlyConfigured):
            get_addon_settings()

    def test_invalid_timeout(self):
        for timeout in (0, -1, '10'):
            with self.subTest(timeout=timeout):
                with override_settings(ADDONS={'LIFECYCLE_TIMEOUT': timeout}):
                    with self.assertRaises(ImproperlyConfigured):
                        get_addon_settings()
