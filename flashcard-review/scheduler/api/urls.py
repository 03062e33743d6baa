from django.urls import path
from .views import (
    DailyReviewView,
    DueCardsView,
    FlipView,
    GradeView,
    ReviewSessionDetailView,
    ReviewSessionListView,
)

urlpatterns = [
    path("decks/<str:deck_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
    path("daily-review", DailyReviewView.as_view(), name="daily-review"),
    path("review-sessions", ReviewSessionListView.as_view(), name="review-sessions"),
    path("review-sessions/<str:session_id>", ReviewSessionDetailView.as_view(), name="review-session"),
    path("review-sessions/<str:session_id>/flip", FlipView.as_view(), name="review-session-flip"),
    path("review-sessions/<str:session_id>/grade", GradeView.as_view(), name="review-session-grade"),
]
