"""
Error handling for the Task Tide API.

Every error response has the shape ``{success: false, error, ...}``:
validation errors add ``details`` (one string per violation), unexpected
failures become a generic 500 whose cause is only logged.
"""

import logging
from typing import Dict, List

from rest_framework import status
from rest_framework.exceptions import APIException, ParseError
from rest_framework.response import Response
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)


class TaskNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Task not found'
    default_code = 'not_found'


def flatten_errors(errors, prefix: str = '') -> List[str]:
    """
    Turn a DRF ``serializer.errors`` structure into a flat list of
    ``"field: message"`` strings, one per violation.
    """
    messages = []
    if isinstance(errors, dict):
        for field, detail in errors.items():
            name = '' if field == 'non_field_errors' else str(field)
            label = f"{prefix}.{name}" if prefix and name else (name or prefix)
            messages.extend(flatten_errors(detail, label))
    elif isinstance(errors, (list, tuple)):
        for detail in errors:
            messages.extend(flatten_errors(detail, prefix))
    else:
        messages.append(f"{prefix}: {errors}" if prefix else str(errors))
    return messages


def validation_error_response(errors: Dict) -> Response:
    return Response(
        {
            'success': False,
            'error': 'Validation error',
            'details': flatten_errors(errors)
        },
        status=status.HTTP_400_BAD_REQUEST
    )


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    Known API exceptions keep their status code; anything DRF does not
    recognise is logged with its traceback and reported as a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'view')
        return Response(
            {
                'success': False,
                'error': 'Internal Server Error',
                'message': 'Something went wrong'
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, ParseError):
        payload = {'success': False, 'error': 'Malformed JSON', 'message': str(exc.detail)}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        payload = {'success': False, 'error': str(response.data['detail'])}
    else:
        payload = {
            'success': False,
            'error': 'Validation error',
            'details': flatten_errors(response.data)
        }

    response.data = payload
    return response
