from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r"clients", views.ClientViewSet, basename="client")
router.register(r"bills", views.BillViewSet, basename="bill")

urlpatterns = router.urls
