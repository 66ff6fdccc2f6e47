"""
URL configuration for license client API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

app_name = "licenses"

urlpatterns = [
    path("redeem", views.RedeemView.as_view(), name="redeem"),
    path("assign", views.AssignView.as_view(), name="assign"),
    path("release", views.ReleaseView.as_view(), name="release"),
    path("status", views.StatusView.as_view(), name="status"),
    path("remove_seat", views.RemoveSeatView.as_view(), name="remove-seat"),
]
