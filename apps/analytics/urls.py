from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    path('inspections/', views.inspection_statistics, name='inspection-statistics'),
]
