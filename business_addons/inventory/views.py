from django.http import JsonResponse

from addon_platform.addons.services import service_registry

from .services import STOCK_SERVICE


def _service_or_response():
    service = service_registry.get_instance(STOCK_SERVICE)
    if service is None:
        return None, JsonResponse({'detail': 'Inventory is not available'}, status=503)
    return service, None


def products(request):
    service, error = _service_or_response()
    if error:
        return error
    return JsonResponse({'results': service.products()})


def stock(request):
    service, error = _service_or_response()
    if error:
        return error
    levels = service.levels()
    if request.GET.get('out_of_stock'):
        levels = [level for level in levels if level['on_hand'] == 0]
    return JsonResponse({'results': levels})
