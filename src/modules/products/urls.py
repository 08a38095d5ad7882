"""Routes for the product resource and its stock actions.

``DefaultRouter`` also serves the API root at ``/api/v1/``.
"""

from rest_framework.routers import DefaultRouter

from modules.products.views import ProductViewSet

app_name = "products"

router = DefaultRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = router.urls
