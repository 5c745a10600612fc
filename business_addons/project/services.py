"""
Project services and lifecycle hooks.
"""

import logging

from addon_platform.addons.services import service_registry

logger = logging.getLogger(__name__)

PROJECT_SERVICE = 'project.projects'
CONTACT_SERVICE = 'crm.contacts'


class ProjectService:

    _projects = [
        {'id': 1, 'name': 'Platform rollout', 'contact_id': 1},
        {'id': 2, 'name': 'Compiler audit', 'contact_id': 2},
    ]
    _tasks = [
        {'id': 1, 'project_id': 1, 'title': 'Kick-off meeting', 'done': True},
        {'id': 2, 'project_id': 1, 'title': 'Migrate data', 'done': False},
        {'id': 3, 'project_id': 2, 'title': 'Review parser', 'done': False},
    ]

    def __init__(self, contacts=None):
        self.contacts = contacts

    def projects(self):
        results = []
        for project in self._projects:
            contact = self.contacts.get(project['contact_id']) if self.contacts else None
            results.append(dict(project, customer=contact['name'] if contact else None))
        return results

    def exists(self, pk):
        return any(project['id'] == pk for project in self._projects)

    def tasks(self, project_id):
        return [task for task in self._tasks if task['project_id'] == project_id]


def initialize():
    # Projects are billed to CRM contacts; crm is initialized first
    if service_registry.get(CONTACT_SERVICE) is None:
        raise RuntimeError(f"Project addon requires the '{CONTACT_SERVICE}' service")
    service_registry.register(PROJECT_SERVICE, ProjectService, {'addon': 'project'})
    logger.info("Project addon initialized")


def cleanup():
    service_registry.unregister(PROJECT_SERVICE)
