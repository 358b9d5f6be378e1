from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # REST API (donor matching, donors, blood requests)
    path('api/', include('api.urls')),
]
