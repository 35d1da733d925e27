"""Cross-origin policy enforcement.

CORSPolicyMiddleware is Starlette's CORSMiddleware with one change: a
preflight the policy rejects is answered with a logged 403 ErrorResponse
instead of Starlette's bare plain-text 400.
"""

from loguru import logger
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

from forum.api.constants import CORS_PREFLIGHT_REJECTED_STATUS, HTTP_403_FORBIDDEN
from forum.api.schemas.errors import ErrorResponse
from forum.api.utils.responses import ORJSONResponse
from forum.core.context import RequestContext
from forum.core.exceptions import ErrorCode, Severity

CORS_FORBIDDEN_MESSAGE = "Cross-origin request not allowed"


class CORSPolicyMiddleware(CORSMiddleware):
    """CORSMiddleware answering rejected preflights with 403."""

    def preflight_response(self, request_headers: Headers) -> Response:
        """Answer a preflight request, turning rejections into 403.

        Args:
            request_headers: Headers of the OPTIONS request.

        Returns:
            Response: Starlette's answer when the preflight is allowed, an
                ErrorResponse with status 403 otherwise.
        """
        response = super().preflight_response(request_headers)
        if response.status_code != CORS_PREFLIGHT_REJECTED_STATUS:
            return response

        reason = bytes(response.body).decode("utf-8", errors="replace")
        logger.error(
            "CORS preflight rejected: {reason}",
            reason=reason,
            origin=request_headers.get("origin"),
            requested_method=request_headers.get("access-control-request-method"),
            requested_headers=request_headers.get("access-control-request-headers"),
        )

        error_response = ErrorResponse(
            error_code=ErrorCode.CORS_FORBIDDEN.value,
            message=CORS_FORBIDDEN_MESSAGE,
            details={"reason": reason},
            correlation_id=RequestContext.get_correlation_id(),
            request_id=RequestContext.get_request_id(),
            severity=Severity.LOW.value,
        )
        return ORJSONResponse(
            status_code=HTTP_403_FORBIDDEN,
            content=error_response.model_dump(mode="json"),
            headers={"Vary": "Origin"},
        )
