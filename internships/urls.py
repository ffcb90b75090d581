from django.urls import path
from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r"internships", views.InternshipViewSet, basename="internship")

urlpatterns = [
    path("internship-management/complete/<int:internship_id>/", views.complete_internship_view, name="internship-complete"),
    path("internship-management/complete-manual/<int:intern_id>/", views.complete_manual_view, name="internship-complete-manual"),
    path("internship-management/progress/<int:internship_id>/", views.progress_view, name="internship-progress"),
    path("internship-management/check-completions/", views.check_completions_view, name="internship-check-completions"),
    path("internship-management/me/", views.my_internship_view, name="internship-me"),
] + router.urls
