from django.urls import path
from . import views

app_name = 'platform'

urlpatterns = [
    path('tenants/', views.tenant_list_view, name='tenant_list'),
    path('tenants/<int:tenant_id>/', views.tenant_detail_view, name='tenant_detail'),
]
