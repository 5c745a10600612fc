"""
CRM view components.
"""

from django.http import Http404, JsonResponse

from addon_platform.addons.services import service_registry

from .services import CONTACT_SERVICE, OPPORTUNITY_SERVICE


def _unavailable(service_id):
    return JsonResponse({'detail': f"Service '{service_id}' is not available"}, status=503)


def dashboard(request):
    contacts = service_registry.get_instance(CONTACT_SERVICE)
    opportunities = service_registry.get_instance(OPPORTUNITY_SERVICE)
    if contacts is None or opportunities is None:
        return _unavailable(CONTACT_SERVICE if contacts is None else OPPORTUNITY_SERVICE)

    pipeline = {stage: len(opportunities.list(stage)) for stage in opportunities.STAGES}
    return JsonResponse({
        'contacts': len(contacts.list()),
        'pipeline': pipeline,
    })


def contacts(request):
    service = service_registry.get_instance(CONTACT_SERVICE)
    if service is None:
        return _unavailable(CONTACT_SERVICE)
    return JsonResponse({'results': service.list()})


def contact_detail(request, pk):
    service = service_registry.get_instance(CONTACT_SERVICE)
    if service is None:
        return _unavailable(CONTACT_SERVICE)
    contact = service.get(pk)
    if contact is None:
        raise Http404(f"Contact {pk} not found")
    return JsonResponse(contact)


def opportunities(request):
    service = service_registry.get_instance(OPPORTUNITY_SERVICE)
    if service is None:
        return _unavailable(OPPORTUNITY_SERVICE)
    return JsonResponse({'results': service.list(request.GET.get('stage'))})
