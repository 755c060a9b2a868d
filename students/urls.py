from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    path('students/', views.register_student_view, name='register'),
    path('students/search/', views.search_students_view, name='search'),
]
