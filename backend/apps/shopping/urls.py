from django.urls import re_path

from .views import AddToCartView, ClearCartView, RemoveFromCartView, SendCartView

urlpatterns = [
    re_path(r"^add-to-cart/?$", AddToCartView.as_view(), name="shopping-add-to-cart"),
    re_path(r"^remove-from-cart/?$", RemoveFromCartView.as_view(), name="shopping-remove-from-cart"),
    re_path(r"^send-cart/?$", SendCartView.as_view(), name="shopping-send-cart"),
    re_path(r"^clear-cart/?$", ClearCartView.as_view(), name="shopping-clear-cart"),
]
