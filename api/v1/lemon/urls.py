"""
URL configuration for the payment provider webhook.
"""

from django.urls import path

from api.v1.lemon import views

app_name = "lemon"

urlpatterns = [
    path("webhook", views.LemonWebhookView.as_view(), name="webhook"),
]
