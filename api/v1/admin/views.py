"""
Admin API views.

These endpoints are used by administrators to:
- Manage the subscription pack catalog
- Approve, assign and unassign customer subscriptions
- Inspect all subscriptions and the overview dashboard
"""

import uuid

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import (
    AssignSubscriptionRequestSerializer,
    CreatePackRequestSerializer,
    ListPacksQuerySerializer,
    ListSubscriptionsQuerySerializer,
    SubscriptionListSerializer,
    SubscriptionOverviewSerializer,
    SubscriptionStatusSerializer,
    UpdatePackRequestSerializer,
)
from api.v1.serializers import PackListSerializer, PackSerializer
from core.domain.value_objects import ApprovalPolicy, SubscriptionStatus
from core.instrumentation import Status, StatusCode, get_tracer
from customers.infrastructure.repositories.django_customer_repository import (
    DjangoCustomerRepository,
)
from packs.application.commands.create_pack import CreatePackCommand
from packs.application.commands.remove_pack import RemovePackCommand
from packs.application.commands.update_pack import UpdatePackCommand
from packs.application.handlers.pack_handlers import (
    CreatePackHandler,
    GetPackHandler,
    ListPacksHandler,
    RemovePackHandler,
    UpdatePackHandler,
)
from packs.application.queries.get_pack import GetPackQuery
from packs.application.queries.list_packs import ListPacksQuery
from packs.infrastructure.repositories.django_pack_repository import DjangoPackRepository
from subscriptions.application.commands.approve_subscription import ApproveSubscriptionCommand
from subscriptions.application.commands.assign_subscription import AssignSubscriptionCommand
from subscriptions.application.commands.unassign_subscription import (
    UnassignSubscriptionCommand,
)
from subscriptions.application.handlers.subscription_lifecycle_handlers import (
    ApproveSubscriptionHandler,
    AssignSubscriptionHandler,
    UnassignSubscriptionHandler,
)
from subscriptions.application.handlers.subscription_query_handlers import (
    GetSubscriptionOverviewHandler,
    ListSubscriptionsHandler,
)
from subscriptions.application.queries.get_subscription_overview import (
    GetSubscriptionOverviewQuery,
)
from subscriptions.application.queries.list_subscriptions import ListSubscriptionsQuery
from subscriptions.infrastructure.repositories.django_subscription_repository import (
    DjangoSubscriptionRepository,
)

# Initialize repositories (in production, use DI container)
_customer_repo = DjangoCustomerRepository()
_pack_repo = DjangoPackRepository()
_subscription_repo = DjangoSubscriptionRepository()

tracer = get_tracer(__name__)

_PAGINATION_PARAMETERS = [
    OpenApiParameter("page", int, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("limit", int, OpenApiParameter.QUERY, required=False),
]


class PackListCreateView(APIView):
    """View for listing and creating subscription packs."""

    @extend_schema(
        operation_id="admin_list_packs",
        summary="List Subscription Packs",
        description="List packs, newest first. Soft-deleted packs are left out by default.",
        tags=["Admin API"],
        parameters=_PAGINATION_PARAMETERS
        + [OpenApiParameter("include_deleted", bool, OpenApiParameter.QUERY, required=False)],
        responses={200: PackListSerializer, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """List subscription packs."""
        return async_to_sync(self._handle_list_packs)(request)

    async def _handle_list_packs(self, request: Request) -> Response:
        """Async handler for list packs."""
        with tracer.start_as_current_span("admin_list_packs") as span:
            serializer = ListPacksQuerySerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)

            handler = ListPacksHandler(pack_repository=_pack_repo)
            result = await handler.handle(
                ListPacksQuery(
                    page=serializer.validated_data["page"],
                    limit=serializer.validated_data["limit"],
                    exclude_deleted=not serializer.validated_data["include_deleted"],
                )
            )

            span.set_attribute("packs.total", result.pagination.total)
            span.set_status(Status(StatusCode.OK))
            return Response(PackListSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_create_pack",
        summary="Create Subscription Pack",
        description="Add a pack to the catalog. The SKU must be unique among non-deleted packs.",
        tags=["Admin API"],
        request=CreatePackRequestSerializer,
        responses={
            201: PackSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "SKU already in use"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a subscription pack."""
        return async_to_sync(self._handle_create_pack)(request)

    async def _handle_create_pack(self, request: Request) -> Response:
        """Async handler for create pack."""
        with tracer.start_as_current_span("admin_create_pack") as span:
            serializer = CreatePackRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            span.set_attribute("pack.sku", serializer.validated_data["sku"])

            handler = CreatePackHandler(pack_repository=_pack_repo)
            result = await handler.handle(CreatePackCommand(**serializer.validated_data))

            span.set_attribute("pack.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(PackSerializer(result).data, status=status.HTTP_201_CREATED)


class PackDetailView(APIView):
    """View for reading, updating and removing one subscription pack."""

    @extend_schema(
        operation_id="admin_get_pack",
        summary="Get Subscription Pack",
        tags=["Admin API"],
        parameters=[
            OpenApiParameter("include_deleted", bool, OpenApiParameter.QUERY, required=False)
        ],
        responses={200: PackSerializer, 404: {"description": "Pack not found"}},
    )
    def get(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Get a subscription pack."""
        return async_to_sync(self._handle_get_pack)(request, pack_id)

    async def _handle_get_pack(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Async handler for get pack."""
        include_deleted = request.query_params.get("include_deleted", "").lower() in ("1", "true")
        handler = GetPackHandler(pack_repository=_pack_repo)
        result = await handler.handle(GetPackQuery(pack_id=pack_id, include_deleted=include_deleted))
        return Response(PackSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_update_pack",
        summary="Update Subscription Pack",
        description=(
            "Change pack attributes. Existing subscriptions keep the expiry "
            "computed when they were activated."
        ),
        tags=["Admin API"],
        request=UpdatePackRequestSerializer,
        responses={
            200: PackSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Pack not found"},
            409: {"description": "SKU already in use"},
        },
    )
    def patch(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Update a subscription pack."""
        return async_to_sync(self._handle_update_pack)(request, pack_id)

    async def _handle_update_pack(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Async handler for update pack."""
        with tracer.start_as_current_span("admin_update_pack") as span:
            span.set_attribute("pack.id", str(pack_id))
            serializer = UpdatePackRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = UpdatePackHandler(pack_repository=_pack_repo)
            result = await handler.handle(
                UpdatePackCommand(pack_id=pack_id, **serializer.validated_data)
            )

            span.set_status(Status(StatusCode.OK))
            return Response(PackSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_remove_pack",
        summary="Remove Subscription Pack",
        description="Soft-delete a pack. Subscriptions that reference it are kept.",
        tags=["Admin API"],
        responses={204: None, 404: {"description": "Pack not found"}},
    )
    def delete(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Remove a subscription pack."""
        return async_to_sync(self._handle_remove_pack)(request, pack_id)

    async def _handle_remove_pack(self, request: Request, pack_id: uuid.UUID) -> Response:
        """Async handler for remove pack."""
        with tracer.start_as_current_span("admin_remove_pack") as span:
            span.set_attribute("pack.id", str(pack_id))
            handler = RemovePackHandler(pack_repository=_pack_repo)
            await handler.handle(RemovePackCommand(pack_id=pack_id))
            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class SubscriptionListView(APIView):
    """View for listing all subscriptions."""

    @extend_schema(
        operation_id="admin_list_subscriptions",
        summary="List Subscriptions",
        description="All subscriptions across customers, newest first, with pack details.",
        tags=["Admin API"],
        parameters=_PAGINATION_PARAMETERS
        + [OpenApiParameter("status", str, OpenApiParameter.QUERY, required=False)],
        responses={200: SubscriptionListSerializer, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """List subscriptions."""
        return async_to_sync(self._handle_list_subscriptions)(request)

    async def _handle_list_subscriptions(self, request: Request) -> Response:
        """Async handler for list subscriptions."""
        with tracer.start_as_current_span("admin_list_subscriptions") as span:
            serializer = ListSubscriptionsQuerySerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)
            status_filter = serializer.validated_data.get("status")

            handler = ListSubscriptionsHandler(
                subscription_repository=_subscription_repo,
                pack_repository=_pack_repo,
            )
            result = await handler.handle(
                ListSubscriptionsQuery(
                    page=serializer.validated_data["page"],
                    limit=serializer.validated_data["limit"],
                    status=SubscriptionStatus(status_filter) if status_filter else None,
                )
            )

            span.set_attribute("subscriptions.total", result.pagination.total)
            span.set_status(Status(StatusCode.OK))
            return Response(SubscriptionListSerializer(result).data, status=status.HTTP_200_OK)


class ApproveSubscriptionView(APIView):
    """View for approving a requested subscription."""

    @extend_schema(
        operation_id="admin_approve_subscription",
        summary="Approve Subscription",
        description=(
            "Approve a REQUESTED subscription. Depending on the approval policy the "
            "subscription is activated at once (replacing the customer's current "
            "one) or left APPROVED."
        ),
        tags=["Admin API"],
        request=None,
        responses={
            200: SubscriptionStatusSerializer,
            404: {"description": "Subscription not found"},
            409: {"description": "Subscription is not in requested status"},
        },
    )
    def post(self, request: Request, subscription_id: uuid.UUID) -> Response:
        """Approve a subscription."""
        return async_to_sync(self._handle_approve)(request, subscription_id)

    async def _handle_approve(self, request: Request, subscription_id: uuid.UUID) -> Response:
        """Async handler for approve subscription."""
        with tracer.start_as_current_span("admin_approve_subscription") as span:
            span.set_attribute("subscription.id", str(subscription_id))
            handler = ApproveSubscriptionHandler(
                subscription_repository=_subscription_repo,
                pack_repository=_pack_repo,
                approval_policy=ApprovalPolicy(settings.SUBSCRIPTION_APPROVAL_POLICY),
            )
            result = await handler.handle(ApproveSubscriptionCommand(subscription_id=subscription_id))

            span.set_attribute("subscription.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(SubscriptionStatusSerializer(result).data, status=status.HTTP_200_OK)


class AssignSubscriptionView(APIView):
    """View for assigning a pack to a customer."""

    @extend_schema(
        operation_id="admin_assign_subscription",
        summary="Assign Subscription",
        description=(
            "Put the customer on the pack immediately. Any current ACTIVE "
            "subscription of the customer is deactivated first."
        ),
        tags=["Admin API"],
        request=AssignSubscriptionRequestSerializer,
        responses={
            200: SubscriptionStatusSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Customer or pack not found"},
        },
    )
    def post(self, request: Request, customer_id: uuid.UUID) -> Response:
        """Assign a subscription."""
        return async_to_sync(self._handle_assign)(request, customer_id)

    async def _handle_assign(self, request: Request, customer_id: uuid.UUID) -> Response:
        """Async handler for assign subscription."""
        with tracer.start_as_current_span("admin_assign_subscription") as span:
            span.set_attribute("customer.id", str(customer_id))
            serializer = AssignSubscriptionRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = AssignSubscriptionHandler(
                subscription_repository=_subscription_repo,
                pack_repository=_pack_repo,
            )
            result = await handler.handle(
                AssignSubscriptionCommand(
                    customer_id=customer_id,
                    pack_id=serializer.validated_data["pack_id"],
                )
            )

            span.set_attribute("subscription.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(SubscriptionStatusSerializer(result).data, status=status.HTTP_200_OK)


class UnassignSubscriptionView(APIView):
    """View for unassigning a customer's subscription."""

    @extend_schema(
        operation_id="admin_unassign_subscription",
        summary="Unassign Subscription",
        description="Deactivate the given subscription. Repeating the call is harmless.",
        tags=["Admin API"],
        responses={
            200: SubscriptionStatusSerializer,
            404: {"description": "Subscription not found for this customer"},
        },
    )
    def delete(
        self, request: Request, customer_id: uuid.UUID, subscription_id: uuid.UUID
    ) -> Response:
        """Unassign a subscription."""
        return async_to_sync(self._handle_unassign)(request, customer_id, subscription_id)

    async def _handle_unassign(
        self, request: Request, customer_id: uuid.UUID, subscription_id: uuid.UUID
    ) -> Response:
        """Async handler for unassign subscription."""
        with tracer.start_as_current_span("admin_unassign_subscription") as span:
            span.set_attribute("customer.id", str(customer_id))
            span.set_attribute("subscription.id", str(subscription_id))
            handler = UnassignSubscriptionHandler(subscription_repository=_subscription_repo)
            result = await handler.handle(
                UnassignSubscriptionCommand(
                    customer_id=customer_id, subscription_id=subscription_id
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(SubscriptionStatusSerializer(result).data, status=status.HTTP_200_OK)


class OverviewView(APIView):
    """View for the admin overview dashboard."""

    @extend_schema(
        operation_id="admin_overview",
        summary="Subscription Overview",
        description=(
            "Customer count, active and pending subscriptions, revenue from "
            "active subscriptions and the most recent activity."
        ),
        tags=["Admin API"],
        responses={200: SubscriptionOverviewSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get the overview."""
        return async_to_sync(self._handle_overview)(request)

    async def _handle_overview(self, request: Request) -> Response:
        """Async handler for overview."""
        handler = GetSubscriptionOverviewHandler(
            subscription_repository=_subscription_repo,
            pack_repository=_pack_repo,
            customer_repository=_customer_repo,
        )
        result = await handler.handle(GetSubscriptionOverviewQuery())
        return Response(SubscriptionOverviewSerializer(result).data, status=status.HTTP_200_OK)
