"""
HR services and lifecycle hooks.
"""

import logging

from addon_platform.addons.services import service_registry

logger = logging.getLogger(__name__)

EMPLOYEE_SERVICE = 'hr.employees'
LEAVE_SERVICE = 'hr.leaves'

# Leave types seeded by initialize(), keyed by code
DEFAULT_LEAVE_TYPES = {
    'annual': 'Annual leave',
    'sick': 'Sick leave',
    'unpaid': 'Unpaid leave',
}


class EmployeeService:
    """Employees and the departments they belong to."""

    _departments = [
        {'id': 1, 'name': 'Engineering', 'parent_id': None},
        {'id': 2, 'name': 'Sales', 'parent_id': None},
    ]
    _employees = [
        {'id': 1, 'name': 'Alan Turing', 'department_id': 1, 'position': 'Engineer'},
        {'id': 2, 'name': 'Joan Clarke', 'department_id': 1, 'position': 'Analyst'},
        {'id': 3, 'name': 'Tommy Flowers', 'department_id': 2, 'position': 'Account manager'},
    ]

    def employees(self, department_id=None):
        if department_id is None:
            return list(self._employees)
        return [e for e in self._employees if e['department_id'] == department_id]

    def departments(self):
        return [
            dict(department, headcount=len(self.employees(department['id'])))
            for department in self._departments
        ]


class LeaveService:
    leave_types = {}

    def list_types(self):
        return [{'code': code, 'name': name} for code, name in sorted(self.leave_types.items())]


def initialize():
    LeaveService.leave_types = dict(DEFAULT_LEAVE_TYPES)
    service_registry.register(EMPLOYEE_SERVICE, EmployeeService, {'addon': 'hr'})
    service_registry.register(LEAVE_SERVICE, LeaveService, {'addon': 'hr'})
    logger.info("HR addon initialized")


def cleanup():
    service_registry.unregister(EMPLOYEE_SERVICE)
    service_registry.unregister(LEAVE_SERVICE)
    LeaveService.leave_types = {}
    logger.info("HR addon cleaned up")
