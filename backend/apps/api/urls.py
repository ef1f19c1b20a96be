from django.urls import path, include

urlpatterns = [
    path("profile/", include("apps.users.urls")),
    path("cart/", include("apps.carts.urls")),
    path("auth/", include("apps.auth.urls")),
]
