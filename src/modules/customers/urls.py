"""Customer URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.customers.views import CustomerProfileView

urlpatterns = [
    path("customers/me/", CustomerProfileView.as_view(), name="customer-profile"),
]
