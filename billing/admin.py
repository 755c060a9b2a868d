# billing/admin.py
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'student', 'tenant', 'amount', 'payment_date', 'status', 'validated_at']
    list_filter = ['status', 'tenant']
    search_fields = ['student__name', 'student__whatsapp']
    raw_id_fields = ['student']
    readonly_fields = ['validated_at', 'created_at', 'updated_at']
    list_select_related = ['student', 'tenant']
