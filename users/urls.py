# users/urls.py
from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('users/', views.user_list_view, name='user_list'),
    path('users/<int:user_id>/', views.user_detail_view, name='user_detail'),
]
