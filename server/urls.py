"""
Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.

It is also a good practice to keep a single URL to the root index page.
"""

from django.contrib import admin
from django.urls import include, path

from server.apps.api.views import health

admin.autodiscover()

urlpatterns = [
    # Apps:
    path('api/health', health, name='health'),
    path('api/auth/', include('server.apps.accounts.urls', namespace='accounts')),
    path('api/', include('server.apps.files.urls', namespace='files')),

    # django-admin:
    path('admin/', admin.site.urls),
]
