"""Routes for the listing directory.

Venues live under ``venues/`` and caterers, decorators and organizers under
``services/``.
"""

from rest_framework.routers import SimpleRouter  # type: ignore

from .views import ServiceProviderViewSet, VenueViewSet

router = SimpleRouter()
router.register("venues", VenueViewSet, basename="venue")
router.register("services", ServiceProviderViewSet, basename="service-provider")

urlpatterns = router.urls
