from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r"tasks", views.TaskViewSet, basename="task")
router.register(r"projects", views.ProjectViewSet, basename="project")

urlpatterns = router.urls
