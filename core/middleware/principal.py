"""
Principal middleware.

The upstream identity provider authenticates callers and forwards the
principal in trusted headers: a role and, for customers, the customer id.
This middleware reads those headers and guards the admin and customer
API surfaces. It does not re-authenticate.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"

ADMIN_API_PREFIX = "/api/v1/admin/"
CUSTOMER_API_PREFIX = "/api/v1/customer/"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as asserted by the identity provider."""

    role: str
    customer_id: Optional[uuid.UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _error(status: int, code: str, message: str) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


class PrincipalMiddleware(MiddlewareMixin):
    """
    Middleware attaching ``request.principal``.

    This middleware:
    1. Parses the role and customer id headers
    2. Requires role ``admin`` on the admin API
    3. Requires role ``customer`` and a customer id on the customer API
    4. Returns 401/403 when those requirements are not met
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and attach the principal.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401/403 if the principal is missing or not allowed,
            None otherwise
        """
        principal = self._read_principal(request)
        request.principal = principal  # type: ignore

        if request.path.startswith(ADMIN_API_PREFIX):
            return self._require(request, principal, ROLE_ADMIN)
        if request.path.startswith(CUSTOMER_API_PREFIX):
            response = self._require(request, principal, ROLE_CUSTOMER)
            if response is None and principal.customer_id is None:
                return _error(401, "UNAUTHENTICATED", "Missing or invalid customer id")
            return response
        return None

    def _read_principal(self, request: HttpRequest) -> Optional[Principal]:
        role = request.headers.get(settings.PRINCIPAL_ROLE_HEADER, "").strip().lower()
        if not role:
            return None

        raw_customer_id = request.headers.get(settings.PRINCIPAL_CUSTOMER_HEADER, "").strip()
        customer_id = None
        if raw_customer_id:
            try:
                customer_id = uuid.UUID(raw_customer_id)
            except ValueError:
                logger.warning("Malformed customer id header: %s", raw_customer_id[:36])
        return Principal(role=role, customer_id=customer_id)

    def _require(
        self, request: HttpRequest, principal: Optional[Principal], role: str
    ) -> Optional[HttpResponse]:
        if principal is None:
            return _error(401, "UNAUTHENTICATED", "Missing principal")
        if principal.role != role:
            logger.warning(
                "Principal with role %s denied on %s",
                principal.role,
                request.path,
                extra={"role": principal.role, "path": request.path},
            )
            return _error(403, "FORBIDDEN", "Not allowed for this role")
        return None
