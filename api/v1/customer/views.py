"""
Customer API views.

These endpoints are used by authenticated customers to:
- Browse the available subscription packs
- Request, inspect and deactivate their subscription
- Page through their subscription history
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.customer.serializers import (
    CurrentSubscriptionSerializer,
    DeactivationSerializer,
    RequestedSubscriptionSerializer,
    RequestSubscriptionRequestSerializer,
    SubscriptionHistoryQuerySerializer,
    SubscriptionHistorySerializer,
)
from api.v1.serializers import PackListSerializer, PaginationQuerySerializer
from core.domain.value_objects import SortOrder
from core.instrumentation import Status, StatusCode, get_tracer
from customers.infrastructure.repositories.django_customer_repository import (
    DjangoCustomerRepository,
)
from packs.application.handlers.pack_handlers import ListPacksHandler
from packs.application.queries.list_packs import ListPacksQuery
from packs.infrastructure.repositories.django_pack_repository import DjangoPackRepository
from subscriptions.application.commands.deactivate_subscription import (
    DeactivateSubscriptionCommand,
)
from subscriptions.application.commands.request_subscription import RequestSubscriptionCommand
from subscriptions.application.handlers.subscription_lifecycle_handlers import (
    DeactivateSubscriptionHandler,
    RequestSubscriptionHandler,
)
from subscriptions.application.handlers.subscription_query_handlers import (
    GetCurrentSubscriptionHandler,
    GetSubscriptionHistoryHandler,
)
from subscriptions.application.queries.get_current_subscription import (
    GetCurrentSubscriptionQuery,
)
from subscriptions.application.queries.get_subscription_history import (
    GetSubscriptionHistoryQuery,
)
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


class AvailablePacksView(APIView):
    """View for the packs a customer can request."""

    @extend_schema(
        operation_id="customer_list_packs",
        summary="List Available Packs",
        tags=["Customer API"],
        parameters=_PAGINATION_PARAMETERS,
        responses={200: PackListSerializer},
    )
    def get(self, request: Request) -> Response:
        """List available packs."""
        return async_to_sync(self._handle_list_packs)(request)

    async def _handle_list_packs(self, request: Request) -> Response:
        """Async handler for list available packs."""
        serializer = PaginationQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        handler = ListPacksHandler(pack_repository=_pack_repo)
        result = await handler.handle(
            ListPacksQuery(
                page=serializer.validated_data["page"],
                limit=serializer.validated_data["limit"],
            )
        )
        return Response(PackListSerializer(result).data, status=status.HTTP_200_OK)


class CustomerSubscriptionView(APIView):
    """View for the calling customer's subscription."""

    @extend_schema(
        operation_id="customer_current_subscription",
        summary="Get Current Subscription",
        description="The customer's ACTIVE subscription and whether it currently grants access.",
        tags=["Customer API"],
        responses={
            200: CurrentSubscriptionSerializer,
            404: {"description": "No active subscription found"},
        },
    )
    def get(self, request: Request) -> Response:
        """Get the current subscription."""
        return async_to_sync(self._handle_current)(request)

    async def _handle_current(self, request: Request) -> Response:
        """Async handler for current subscription."""
        customer_id = request.principal.customer_id
        with tracer.start_as_current_span("customer_current_subscription") as span:
            span.set_attribute("customer.id", str(customer_id))
            handler = GetCurrentSubscriptionHandler(
                subscription_repository=_subscription_repo,
                pack_repository=_pack_repo,
                customer_repository=_customer_repo,
            )
            result = await handler.handle(GetCurrentSubscriptionQuery(customer_id=customer_id))

            span.set_attribute("subscription.is_valid", result.is_valid)
            span.set_status(Status(StatusCode.OK))
            return Response(CurrentSubscriptionSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="customer_request_subscription",
        summary="Request Subscription",
        description="Request a pack by SKU. Fails while the customer holds an active subscription.",
        tags=["Customer API"],
        request=RequestSubscriptionRequestSerializer,
        responses={
            201: RequestedSubscriptionSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Pack not found"},
            409: {"description": "Customer already has an active subscription"},
        },
    )
    def post(self, request: Request) -> Response:
        """Request a subscription."""
        return async_to_sync(self._handle_request)(request)

    async def _handle_request(self, request: Request) -> Response:
        """Async handler for request subscription."""
        customer_id = request.principal.customer_id
        with tracer.start_as_current_span("customer_request_subscription") as span:
            span.set_attribute("customer.id", str(customer_id))
            serializer = RequestSubscriptionRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            span.set_attribute("pack.sku", serializer.validated_data["sku"])

            handler = RequestSubscriptionHandler(
                subscription_repository=_subscription_repo,
                pack_repository=_pack_repo,
            )
            result = await handler.handle(
                RequestSubscriptionCommand(
                    customer_id=customer_id, sku=serializer.validated_data["sku"]
                )
            )

            span.set_attribute("subscription.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                RequestedSubscriptionSerializer(result).data, status=status.HTTP_201_CREATED
            )

    @extend_schema(
        operation_id="customer_deactivate_subscription",
        summary="Deactivate Subscription",
        tags=["Customer API"],
        responses={
            200: DeactivationSerializer,
            404: {"description": "No active subscription found"},
        },
    )
    def delete(self, request: Request) -> Response:
        """Deactivate the current subscription."""
        return async_to_sync(self._handle_deactivate)(request)

    async def _handle_deactivate(self, request: Request) -> Response:
        """Async handler for deactivate subscription."""
        customer_id = request.principal.customer_id
        with tracer.start_as_current_span("customer_deactivate_subscription") as span:
            span.set_attribute("customer.id", str(customer_id))
            handler = DeactivateSubscriptionHandler(subscription_repository=_subscription_repo)
            result = await handler.handle(DeactivateSubscriptionCommand(customer_id=customer_id))

            span.set_status(Status(StatusCode.OK))
            return Response(DeactivationSerializer(result).data, status=status.HTTP_200_OK)


class SubscriptionHistoryView(APIView):
    """View for the calling customer's subscription history."""

    @extend_schema(
        operation_id="customer_subscription_history",
        summary="Subscription History",
        description="Every subscription of the customer ordered by assignment time.",
        tags=["Customer API"],
        parameters=_PAGINATION_PARAMETERS
        + [OpenApiParameter("sort", str, OpenApiParameter.QUERY, required=False, enum=["asc", "desc"])],
        responses={200: SubscriptionHistorySerializer, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """Get subscription history."""
        return async_to_sync(self._handle_history)(request)

    async def _handle_history(self, request: Request) -> Response:
        """Async handler for subscription history."""
        serializer = SubscriptionHistoryQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        handler = GetSubscriptionHistoryHandler(
            subscription_repository=_subscription_repo,
            pack_repository=_pack_repo,
            customer_repository=_customer_repo,
        )
        result = await handler.handle(
            GetSubscriptionHistoryQuery(
                customer_id=request.principal.customer_id,
                page=serializer.validated_data["page"],
                limit=serializer.validated_data["limit"],
                sort_order=SortOrder(serializer.validated_data["sort"]),
            )
        )
        return Response(SubscriptionHistorySerializer(result).data, status=status.HTTP_200_OK)
