"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin_api"

urlpatterns = [
    path(
        "subscription-packs",
        views.PackListCreateView.as_view(),
        name="packs",
    ),
    path(
        "subscription-packs/<uuid:pack_id>",
        views.PackDetailView.as_view(),
        name="pack-detail",
    ),
    path(
        "subscriptions",
        views.SubscriptionListView.as_view(),
        name="subscriptions",
    ),
    path(
        "subscriptions/<uuid:subscription_id>/approve",
        views.ApproveSubscriptionView.as_view(),
        name="approve-subscription",
    ),
    path(
        "customers/<uuid:customer_id>/assign-subscription",
        views.AssignSubscriptionView.as_view(),
        name="assign-subscription",
    ),
    path(
        "customers/<uuid:customer_id>/subscription/<uuid:subscription_id>",
        views.UnassignSubscriptionView.as_view(),
        name="unassign-subscription",
    ),
    path(
        "overview",
        views.OverviewView.as_view(),
        name="overview",
    ),
]
