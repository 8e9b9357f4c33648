from django.urls import path
from . import views

app_name = 'inspections'

urlpatterns = [
    # GET    /api/inspections/              - List inspections (store, search, limit)
    # POST   /api/inspections/              - Save draft or submit a new inspection
    path('', views.inspection_list_create, name='inspection-list'),

    # GET    /api/inspections/new/          - Fresh checklist and defaults for a new form
    path('new/', views.new_inspection, name='inspection-new'),

    # GET    /api/inspections/{id}/         - Read-only view with summary
    # PATCH  /api/inspections/{id}/         - Save draft edits
    path('<str:inspection_id>/', views.inspection_detail, name='inspection-detail'),

    # GET    /api/inspections/{id}/edit/    - Load draft for editing (303 when finalized)
    path('<str:inspection_id>/edit/', views.inspection_edit, name='inspection-edit'),

    # POST   /api/inspections/{id}/submit/  - Submit draft as completed
    path('<str:inspection_id>/submit/', views.inspection_submit, name='inspection-submit'),
]
