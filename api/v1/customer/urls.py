"""
URL configuration for customer API endpoints.
"""

from django.urls import path

from api.v1.customer import views

app_name = "customer_api"

urlpatterns = [
    path(
        "subscription-packs",
        views.AvailablePacksView.as_view(),
        name="available-packs",
    ),
    path(
        "subscription",
        views.CustomerSubscriptionView.as_view(),
        name="subscription",
    ),
    path(
        "subscription-history",
        views.SubscriptionHistoryView.as_view(),
        name="subscription-history",
    ),
]
