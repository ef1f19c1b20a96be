from django.urls import path

from .views import PasswordChangeView, ProfileView

urlpatterns = [
    path("", ProfileView.as_view(), name="api-profile"),
    path("change-password/", PasswordChangeView.as_view(), name="api-profile-change-password"),
]
