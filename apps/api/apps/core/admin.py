from django.contrib import admin
from .models import SystemSetting


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ['category', 'key', 'value', 'updated_at']
    list_filter = ['category']
    search_fields = ['key', 'description']
    readonly_fields = ['created_at', 'updated_at']
