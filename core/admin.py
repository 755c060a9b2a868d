# core/admin.py
from django.contrib import admin
from .models import Tenant, TenantModule, TenantMember


class TenantModuleInline(admin.TabularInline):
    model = TenantModule
    extra = 0


class TenantMemberInline(admin.TabularInline):
    model = TenantMember
    extra = 0
    raw_id_fields = ['user']


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [TenantModuleInline, TenantMemberInline]
