from django.contrib import admin
from django.urls import include, path

admin.autodiscover()

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("masterdata.urls")),
    path("api/production/", include("production.urls")),
    path("api/inventory/", include("inventory.urls")),
]
