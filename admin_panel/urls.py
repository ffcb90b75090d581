from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import DashboardViewSet, AdminActivityViewSet, NotificationViewSet

router = DefaultRouter()
router.register(r'dashboard', DashboardViewSet, basename='dashboard')
router.register(r'activities', AdminActivityViewSet, basename='activities')
router.register(r'notifications', NotificationViewSet, basename='notifications')

urlpatterns = [
    path('', include(router.urls)),
]
