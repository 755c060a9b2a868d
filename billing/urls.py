from django.urls import path
from . import views

app_name = 'billing'

urlpatterns = [
    # Dashboard
    path('dashboard/', views.dashboard_view, name='dashboard'),

    # Payment audit & actions
    path('payments/audit/', views.audit_list_view, name='audit_list'),
    path('payments/approve/', views.approve_payment_view, name='approve_payment'),
    path('payments/manual/', views.manual_payment_view, name='manual_payment'),
    path('payments/<int:payment_id>/reject/', views.reject_payment_view, name='reject_payment'),
]
