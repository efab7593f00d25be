"""Order routes: collection, detail and the ``status`` action."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = router.urls
