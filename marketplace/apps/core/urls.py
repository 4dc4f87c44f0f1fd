from django.urls import path

from .views import LivenessView, ReadinessView

app_name = "core"

urlpatterns = [
    path("", LivenessView.as_view(), name="liveness"),
    path("ready/", ReadinessView.as_view(), name="readiness"),
]
