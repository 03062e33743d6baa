from django.urls import include, path

urlpatterns = [
    path("api/", include("decks.urls")),
    path("api/", include("scheduler.api.urls")),
]
