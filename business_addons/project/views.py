from django.http import Http404, JsonResponse

from addon_platform.addons.services import service_registry

from .services import CONTACT_SERVICE, PROJECT_SERVICE


def _get_service():
    if service_registry.get(PROJECT_SERVICE) is None:
        return None
    return service_registry.get_instance(
        PROJECT_SERVICE, contacts=service_registry.get_instance(CONTACT_SERVICE)
    )


def projects(request):
    service = _get_service()
    if service is None:
        return JsonResponse({'detail': 'Projects are not available'}, status=503)
    return JsonResponse({'results': service.projects()})


def project_tasks(request, pk):
    service = _get_service()
    if service is None:
        return JsonResponse({'detail': 'Projects are not available'}, status=503)
    if not service.exists(pk):
        raise Http404(f"Project {pk} not found")
    return JsonResponse({'project_id': pk, 'results': service.tasks(pk)})
