"""
CRM services and lifecycle hooks.
"""

import logging

from addon_platform.addons.services import service_registry

logger = logging.getLogger(__name__)

CONTACT_SERVICE = 'crm.contacts'
OPPORTUNITY_SERVICE = 'crm.opportunities'


class ContactService:
    """Read access to CRM contacts."""

    _contacts = [
        {'id': 1, 'name': 'Ada Lovelace', 'company': 'Analytical Engines', 'email': 'ada@example.com'},
        {'id': 2, 'name': 'Grace Hopper', 'company': 'Compilers Inc', 'email': 'grace@example.com'},
    ]

    def list(self):
        return list(self._contacts)

    def get(self, pk):
        return next((c for c in self._contacts if c['id'] == pk), None)


class OpportunityService:
    """Read access to the sales pipeline."""

    STAGES = ['new', 'qualified', 'proposal', 'won', 'lost']

    _opportunities = [
        {'id': 1, 'title': 'Platform licence', 'contact_id': 1, 'stage': 'proposal', 'amount': '12000.00'},
        {'id': 2, 'title': 'Support renewal', 'contact_id': 2, 'stage': 'qualified', 'amount': '3500.00'},
    ]

    def list(self, stage=None):
        if stage is None:
            return list(self._opportunities)
        return [o for o in self._opportunities if o['stage'] == stage]


def initialize():
    service_registry.register(CONTACT_SERVICE, ContactService, {'addon': 'crm'})
    service_registry.register(OPPORTUNITY_SERVICE, OpportunityService, {'addon': 'crm'})
    logger.info("CRM addon initialized")


def cleanup():
    # unregister() returns False for unknown ids, so this is safe after a failed initialize
    service_registry.unregister(CONTACT_SERVICE)
    service_registry.unregister(OPPORTUNITY_SERVICE)
    logger.info("CRM addon cleaned up")
