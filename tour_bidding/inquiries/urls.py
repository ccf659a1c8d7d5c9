from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import BookingInquiryViewSet

router = DefaultRouter()
router.register(r'inquiries', BookingInquiryViewSet, basename='inquiry')

urlpatterns = [
    path('', include(router.urls)),
]
