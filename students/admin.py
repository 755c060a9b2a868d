# students/admin.py
from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'whatsapp', 'tenant', 'due_date', 'monthly_fee', 'status']
    list_filter = ['status', 'gender', 'tenant']
    search_fields = ['name', 'whatsapp']
    date_hierarchy = 'due_date'
    list_select_related = ['tenant']
