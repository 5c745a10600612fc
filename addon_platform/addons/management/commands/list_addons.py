"""
Management command to list registered addons.

Usage:
    python manage.py list_addons                 # Table of addons and their status
    python manage.py list_addons --routes        # Include each addon's routes
    python manage.py list_addons --format=json
    python manage.py list_addons --sync          # Also write addon records
"""

import json

from django.core.management.base import BaseCommand

from addon_platform.addons.apps import get_registry
from addon_platform.addons.models import AddonRecord


class Command(BaseCommand):
    help = 'List registered addons'

    def add_arguments(self, parser):
        parser.add_argument(
            '--routes',
            action='store_true',
            help='Show the routes contributed by each addon'
        )
        parser.add_argument(
            '--sync',
            action='store_true',
            help='Write the registry state to the addon records'
        )
        parser.add_argument(
            '--format',
            choices=['table', 'json'],
            default='table',
            help='Output format (default: table)'
        )

    def handle(self, *args, **options):
        registry = get_registry()
        modules = registry.get_all_modules()

        if options['sync']:
            records = AddonRecord.objects.sync_from_registry(registry)
            self.stdout.write(self.style.SUCCESS(f"Synced {len(records)} addon record(s)"))

        if not modules:
            self.stdout.write(self.style.WARNING('No addons registered'))
            return

        health = registry.get_module_health()

        if options['format'] == 'json':
            data = []
            for package in modules:
                entry = dict(package.descriptor.to_dict(), **health[package.name])
                entry['components'] = list(package.components)
                if options['routes']:
                    entry['routes'] = [
                        {'path': route.path, 'view_id': route.view_id}
                        for route in package.route_fragment
                    ]
                data.append(entry)
            self.stdout.write(json.dumps(
                {'state': registry.state.value, 'modules': data}, indent=2
            ))
            return

        self.stdout.write(f"Registry state: {registry.state.value}")
        self.stdout.write(f"{'Name':<15} {'Version':<10} {'Status':<12} {'Components':<10} Label")
        self.stdout.write('-' * 70)
        for package in modules:
            module_health = health[package.name]
            line = (
                f"{package.name:<15} {package.version:<10} {module_health['status']:<12} "
                f"{len(package.components):<10} {package.descriptor.display_label}"
            )
            if module_health['status'] == 'failed':
                self.stdout.write(self.style.ERROR(line))
                self.stdout.write(f"    {module_health['error']}")
            else:
                self.stdout.write(line)

            if options['routes']:
                for route in package.route_fragment:
                    self.stdout.write(f"    {route.path} -> {route.view_id}")

        self.stdout.write(f"\nTotal: {len(modules)} addon(s)")
