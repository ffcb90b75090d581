from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import (
    UserViewSet, RegisterView, CustomAuthToken, UserProfileView, LogoutView
)

# DRF router for admin user management (list, create, retrieve, update, deactivate)
router = SimpleRouter()
router.register(r'', UserViewSet, basename='user')


urlpatterns = [
    # Authentication
    path('login/', CustomAuthToken.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('register/', RegisterView.as_view(), name='register'),

    # User profile
    path('me/', UserProfileView.as_view(), name='user-profile'),

    # User CRUD via router
    path('', include(router.urls)),
]
