import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ConsultationValidationError(Exception):
    """A booking or cancellation broke a scheduling rule."""

    code = 'consultation_validation'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def api_exception_handler(exc, context):
    if isinstance(exc, ConsultationValidationError):
        return Response({'ok': False, 'error': {'code': exc.code, 'message': exc.message}}, status=400)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", getattr(view, '__name__', None) or view.__class__.__name__)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    resp.data = {'ok': False, 'error': {'code': 'api_error', 'message': detail}}
    return resp
