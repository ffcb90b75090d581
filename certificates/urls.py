# certificates/urls.py
from django.urls import path
from rest_framework.routers import SimpleRouter
from .views import CertificateViewSet, verify_certificate, view_certificate

router = SimpleRouter()
router.register("", CertificateViewSet, basename="certificate")

urlpatterns = [
    path("verify/<str:certificate_id>/", verify_certificate, name="certificate-verify"),
    path("view/<str:certificate_id>/", view_certificate, name="certificate-view"),

    *router.urls,
]
