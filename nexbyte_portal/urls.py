from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse

def home(request):
    return JsonResponse({"message": "NexByte portal API is running."})

urlpatterns = [
    path('', home),
    path('admin/', admin.site.urls),

    path('api/users/', include(('users.urls', 'users'), namespace='users')),
    path('api/certificates/', include(('certificates.urls', 'certificates'), namespace='certificates')),
    path('api/admin-panel/', include('admin_panel.urls')),
    path("api/", include("internships.urls")),
    path("api/", include("tasks.urls")),
    path("api/", include("clients.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
