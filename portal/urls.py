from django.urls import path
from . import views

urlpatterns = [
    path("", views.home, name="home"),  # /
    path("booking/providers", views.booking_providers, name="booking_providers"),
    path("booking/slots", views.booking_slots, name="booking_slots"),
    path("booking/book", views.book, name="book"),
    path("my-appointments/", views.my_appointments, name="my_appointments"),
    path("my-appointments/<int:appt_id>/cancel", views.cancel_appointment, name="cancel_appointment"),
    path("profile/", views.profile, name="profile"),
    path("my-sessions/", views.my_sessions, name="my_sessions"),
    path("my-sessions/<int:session_id>/", views.my_session_detail, name="my_session_detail"),
    path("provider/", views.provider_parameters, name="provider_parameters"),
    path("provider/appointments/", views.provider_appointments, name="provider_appointments"),
    path("provider/appointments/note", views.provider_note, name="provider_note"),
    path("provider/waiting/", views.provider_waiting, name="provider_waiting"),
    path("provider/sessions/", views.provider_sessions, name="provider_sessions"),
    path("provider/sessions/start", views.provider_session_start, name="provider_session_start"),
    path("provider/sessions/<int:session_id>/", views.provider_session_detail, name="provider_session_detail"),
    path("admin/", views.admin_dashboard, name="admin_dashboard"),
    path("admin/departments/", views.admin_departments, name="admin_departments"),
    path("admin/roles/", views.admin_roles, name="admin_roles"),
    path("admin/confirmation/", views.admin_confirmation, name="admin_confirmation"),
    path("admin/confirmation/check-in", views.admin_check_in, name="admin_check_in"),
    path("admin/confirmation/book", views.admin_book, name="admin_book"),
    path("operator/", views.operator_home, name="operator_home"),
    path("operator/check-in", views.operator_check_in, name="operator_check_in"),
    path("operator/book", views.operator_book, name="operator_book"),
    path("operator/dashboard/", views.operator_dashboard, name="operator_dashboard"),
    path("operator/walk-in/", views.operator_walk_in, name="operator_walk_in"),
    path("api/health/", views.health, name="health"),
]
