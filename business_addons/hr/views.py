"""
HR view components.
"""

from rest_framework import permissions
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from addon_platform.addons.services import service_registry

from .services import EMPLOYEE_SERVICE, LEAVE_SERVICE


class ServiceUnavailable(APIException):
    status_code = 503
    default_detail = 'HR service is not available.'
    default_code = 'service_unavailable'


class HrView(APIView):
    """Base view resolving an HR service at request time"""
    permission_classes = [permissions.AllowAny]
    service_id = EMPLOYEE_SERVICE

    def get_service(self):
        service = service_registry.get_instance(self.service_id)
        if service is None:
            raise ServiceUnavailable(f"Service '{self.service_id}' is not available")
        return service


class HrDashboardView(HrView):

    def get(self, request):
        service = self.get_service()
        return Response({
            'employees': len(service.employees()),
            'departments': len(service.departments()),
        })


class EmployeesView(HrView):

    def get(self, request):
        department_id = request.query_params.get('department')
        service = self.get_service()
        return Response({
            'results': service.employees(
                int(department_id) if department_id and department_id.isdigit() else None
            )
        })


class DepartmentsView(HrView):

    def get(self, request):
        return Response({'results': self.get_service().departments()})


class LeavesView(HrView):
    service_id = LEAVE_SERVICE

    def get(self, request):
        return Response({'leave_types': self.get_service().list_types()})
