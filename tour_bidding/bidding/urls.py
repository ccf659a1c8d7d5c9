from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import ArtistViewSet, VenueViewSet, TourRequestViewSet, VenueBidViewSet, ShowViewSet

router = DefaultRouter()
router.register(r'artists', ArtistViewSet)
router.register(r'venues', VenueViewSet)
router.register(r'tour-requests', TourRequestViewSet)
router.register(r'bids', VenueBidViewSet)
router.register(r'shows', ShowViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
