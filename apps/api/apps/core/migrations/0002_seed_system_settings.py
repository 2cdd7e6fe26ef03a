# Data migration: default business settings

from django.db import migrations


def seed_settings(apps, schema_editor):
    from apps.core.services import DEFAULT_SETTINGS

    SystemSetting = apps.get_model('core', 'SystemSetting')
    for category, key, value, description in DEFAULT_SETTINGS:
        SystemSetting.objects.get_or_create(
            category=category,
            key=key,
            defaults={'value': value, 'description': description},
        )


def unseed_settings(apps, schema_editor):
    from apps.core.services import DEFAULT_SETTINGS

    SystemSetting = apps.get_model('core', 'SystemSetting')
    for category, key, _value, _description in DEFAULT_SETTINGS:
        SystemSetting.objects.filter(category=category, key=key).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_settings, unseed_settings),
    ]
