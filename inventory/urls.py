from django.urls import path

from inventory.views import api

app_name = "inventory"

urlpatterns = [
    path("items/", api.item_list, name="item-list"),
    path("items/export/", api.item_export, name="item-export"),
    path("items/<int:pk>/", api.item_detail, name="item-detail"),
]
