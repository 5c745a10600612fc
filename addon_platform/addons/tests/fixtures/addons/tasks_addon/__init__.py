from django.http import JsonResponse


def task_list(request):
    return JsonResponse({'results': []})


routes = [
    {'path': 'tasks/', 'view': 'TaskListView', 'title': 'Tasks'},
]

components = {
    'TaskListView': task_list,
}

menus = [
    {'id': 'tasks', 'name': 'Tasks', 'sequence': 70, 'route': 'tasks/'},
]
