"""
Addon System Models

Persistent record of every addon the platform has seen, mirroring the
registry so operators can inspect addon state outside the running process.
"""

from django.db import models, transaction
from django.utils import timezone


class AddonRecordManager(models.Manager):
    """Manager for addon records"""

    def active(self):
        return self.filter(active=True)

    def sync_from_registry(self, registry):
        """
        Upsert one record per registered module and mark records of
        modules that are no longer registered as inactive.

        Returns:
            List of records for the registered modules, in registration order
        """
        from .registry import ModuleStatus

        records = []
        with transaction.atomic():
            for package in registry.get_all_modules():
                descriptor = package.descriptor
                status = registry.module_status(package.name)
                error = registry.module_error(package.name)
                record, created = self.update_or_create(
                    name=descriptor.name,
                    defaults={
                        'display_label': descriptor.display_label,
                        'version': descriptor.version,
                        'summary': descriptor.summary,
                        'description': descriptor.description,
                        'application': descriptor.application,
                        'auto_install': descriptor.auto_install,
                        'installable': descriptor.installable,
                        'dependencies': list(descriptor.dependencies),
                        'model_names': list(descriptor.models),
                        'active': status == ModuleStatus.ACTIVE,
                        'installed': True,
                        'status': status.value if status else ModuleStatus.REGISTERED.value,
                        'last_error': str(error) if error else '',
                    },
                )
                if record.installed_at is None:
                    record.installed_at = timezone.now()
                    record.save(update_fields=['installed_at'])
                records.append(record)

            self.exclude(
                name__in=[package.name for package in registry.get_all_modules()]
            ).update(active=False, status='unregistered')

        return records


class AddonRecord(models.Model):
    """
    Stored state of one addon.
    """

    STATUS_CHOICES = [
        ('registered', 'Registered'),
        ('active', 'Active'),
        ('failed', 'Failed'),
        ('cleaned_up', 'Cleaned up'),
        ('unregistered', 'Unregistered'),
    ]

    name = models.CharField(max_length=100, unique=True, help_text="Unique addon name (e.g. crm)")
    display_label = models.CharField(max_length=200)
    version = models.CharField(max_length=50)
    summary = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    application = models.BooleanField(default=True)
    auto_install = models.BooleanField(default=False)
    installable = models.BooleanField(default=True)

    dependencies = models.JSONField(default=list, blank=True)
    model_names = models.JSONField(default=list, blank=True)

    active = models.BooleanField(default=False, db_index=True)
    installed = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='registered')
    last_error = models.TextField(blank=True)
    installed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AddonRecordManager()

    class Meta:
        db_table = 'addon_records'
        ordering = ['display_label']
        verbose_name = 'Addon'
        verbose_name_plural = 'Addons'

    def __str__(self):
        return f"{self.display_label} ({self.name}@{self.version})"
