# Generated manually for the addons app

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AddonRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Unique addon name (e.g. crm)', max_length=100, unique=True)),
                ('display_label', models.CharField(max_length=200)),
                ('version', models.CharField(max_length=50)),
                ('summary', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('application', models.BooleanField(default=True)),
                ('auto_install', models.BooleanField(default=False)),
                ('installable', models.BooleanField(default=True)),
                ('dependencies', models.JSONField(blank=True, default=list)),
                ('model_names', models.JSONField(blank=True, default=list)),
                ('active', models.BooleanField(db_index=True, default=False)),
                ('installed', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('registered', 'Registered'), ('active', 'Active'), ('failed', 'Failed'), ('cleaned_up', 'Cleaned up'), ('unregistered', 'Unregistered')], default='registered', max_length=20)),
                ('last_error', models.TextField(blank=True)),
                ('installed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Addon',
                'verbose_name_plural': 'Addons',
                'db_table': 'addon_records',
                'ordering': ['display_label'],
            },
        ),
    ]
