"""
API Views for Task Tide.

Task CRUD plus the AI endpoints (suggestions, analytics, bulk
prioritization). Every response carries ``success``; errors are shaped by
tasks.exceptions.api_exception_handler.
"""

import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.request import Request
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .entities import CATEGORY_CHOICES, PRIORITY_CHOICES
from .exceptions import flatten_errors, validation_error_response
from .insights import build_analytics, generate_suggestions
from .repository import ALL, TaskFilter
from .scoring import prioritize_tasks
from .serializers import (
    PrioritizeRequestSerializer,
    SuggestionSerializer,
    TaskInputSerializer,
    TaskSerializer,
)
from .services import get_task_service


logger = logging.getLogger(__name__)


def task_filter_from_query(params) -> TaskFilter:
    """
    Build a TaskFilter from query parameters.

    ``completed`` filters on True only for the literal "true"; any other
    non-empty value filters on False and a missing or empty one disables it.
    """
    completed = params.get('completed')
    return TaskFilter(
        category=params.get('category') or None,
        priority=params.get('priority') or None,
        completed=None if completed in (None, '') else completed == 'true'
    )


# ============================================
# TASK ENDPOINTS
# ============================================

@extend_schema(
    methods=['GET'],
    summary="List tasks",
    description="""
    Return tasks matching every given filter, incomplete first, then by
    AI score (highest first), then by due date.
    """,
    parameters=[
        OpenApiParameter('category', OpenApiTypes.STR, enum=CATEGORY_CHOICES + [ALL]),
        OpenApiParameter('priority', OpenApiTypes.STR, enum=PRIORITY_CHOICES + [ALL]),
        OpenApiParameter('completed', OpenApiTypes.STR, enum=['true', 'false']),
    ],
    responses={200: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@extend_schema(
    methods=['POST'],
    summary="Create a task",
    request=TaskInputSerializer,
    responses={201: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@api_view(['GET', 'POST'])
def task_collection(request: Request) -> Response:
    """
    GET  /api/tasks?category=&priority=&completed=
    POST /api/tasks
    """
    service = get_task_service()

    if request.method == 'POST':
        serializer = TaskInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        task = service.create_task(serializer.validated_data)
        return Response(
            {
                'success': True,
                'data': TaskSerializer(task).data,
                'message': 'Task created successfully'
            },
            status=status.HTTP_201_CREATED
        )

    tasks = service.list_tasks(task_filter_from_query(request.query_params))
    return Response({
        'success': True,
        'data': TaskSerializer(tasks, many=True).data,
        'count': len(tasks)
    })


@extend_schema(
    methods=['GET'],
    summary="Get a task",
    responses={200: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@extend_schema(
    methods=['PUT'],
    summary="Update a task",
    description="Partial update: only the fields sent are validated and changed.",
    request=TaskInputSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@extend_schema(
    methods=['DELETE'],
    summary="Delete a task",
    responses={200: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@api_view(['GET', 'PUT', 'DELETE'])
def task_detail(request: Request, task_id: str) -> Response:
    """
    GET    /api/tasks/<id>
    PUT    /api/tasks/<id>
    DELETE /api/tasks/<id>
    """
    service = get_task_service()

    if request.method == 'DELETE':
        task = service.delete_task(task_id)
        return Response({
            'success': True,
            'data': TaskSerializer(task).data,
            'message': 'Task deleted successfully'
        })

    # Unknown ids are reported before payload problems.
    task = service.get_task(task_id)

    if request.method == 'PUT':
        serializer = TaskInputSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        task = service.update_task(task_id, serializer.validated_data)
        return Response({
            'success': True,
            'data': TaskSerializer(task).data,
            'message': 'Task updated successfully'
        })

    return Response({
        'success': True,
        'data': TaskSerializer(task).data
    })


@extend_schema(
    summary="Toggle task completion",
    request=None,
    responses={200: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    tags=['Tasks']
)
@api_view(['PATCH'])
def toggle_task(request: Request, task_id: str) -> Response:
    """
    PATCH /api/tasks/<id>/toggle
    """
    task = get_task_service().toggle_task(task_id)
    state = 'completed' if task.completed else 'incomplete'
    return Response({
        'success': True,
        'data': TaskSerializer(task).data,
        'message': f'Task marked as {state}'
    })


# ============================================
# AI ENDPOINTS
# ============================================

@extend_schema(
    summary="Get AI suggestions",
    description="Nudges derived from overdue work, missing deadlines, category load, "
                "today's progress and total workload.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['AI']
)
@api_view(['GET'])
def ai_suggestions(request: Request) -> Response:
    """
    GET /api/ai/suggestions
    """
    tasks = get_task_service().all_tasks()
    suggestions = generate_suggestions(tasks, timezone.now())
    logger.debug("Generated %d suggestion(s) for %d task(s)", len(suggestions), len(tasks))
    return Response({
        'success': True,
        'data': SuggestionSerializer(suggestions, many=True).data,
        'count': len(suggestions)
    })


@extend_schema(
    summary="Get productivity analytics",
    responses={200: OpenApiTypes.OBJECT},
    tags=['AI']
)
@api_view(['GET'])
def ai_analytics(request: Request) -> Response:
    """
    GET /api/ai/analytics
    """
    report = build_analytics(get_task_service().all_tasks(), timezone.now())
    return Response({
        'success': True,
        'data': report.to_dict()
    })


@extend_schema(
    summary="Prioritize tasks",
    description="""
    Re-score the submitted tasks with the category-weighted AI score and
    return them sorted highest first. Nothing is stored.
    """,
    request=PrioritizeRequestSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
    tags=['AI']
)
@api_view(['POST'])
def ai_prioritize(request: Request) -> Response:
    """
    POST /api/ai/prioritize

    Request Body:
    {
        "tasks": [{"title": "...", "priority": "high", "category": "work", "dueDate": "..."}]
    }
    """
    serializer = PrioritizeRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {
                'success': False,
                'error': 'Tasks must be an array',
                'details': flatten_errors(serializer.errors)
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    prioritized = prioritize_tasks(serializer.validated_data['tasks'])
    return Response({
        'success': True,
        'data': prioritized,
        'message': 'Tasks prioritized successfully'
    })


# ============================================
# INFO ENDPOINTS
# ============================================

@extend_schema(
    summary="Health check",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Info']
)
@api_view(['GET'])
def health(request: Request) -> Response:
    """
    GET /api/health
    """
    return Response({
        'success': True,
        'status': 'OK',
        'timestamp': timezone.now().isoformat()
    })


@extend_schema(
    summary="API information",
    description="Get API information and available endpoints.",
    responses={200: OpenApiTypes.OBJECT},
    tags=['Info']
)
@api_view(['GET'])
def api_info(request: Request) -> Response:
    """
    Return API information and available endpoints.

    GET /api/
    """
    return Response({
        'name': 'Task Tide API',
        'version': '1.0.0',
        'documentation': '/api/docs/',
        'features': [
            'Task CRUD with category/priority/completion filters',
            'Heuristic AI urgency score (0-100)',
            'AI suggestions and productivity analytics',
            'Category-weighted bulk prioritization',
            'OpenAPI/Swagger documentation',
        ],
        'endpoints': {
            'GET /api/tasks': 'List tasks (filters: category, priority, completed)',
            'GET /api/tasks/<id>': 'Get a task',
            'POST /api/tasks': 'Create a task',
            'PUT /api/tasks/<id>': 'Update a task',
            'DELETE /api/tasks/<id>': 'Delete a task',
            'PATCH /api/tasks/<id>/toggle': 'Toggle task completion',
            'GET /api/ai/suggestions': 'Get AI suggestions',
            'GET /api/ai/analytics': 'Get productivity analytics',
            'POST /api/ai/prioritize': 'Prioritize a list of tasks',
            'GET /api/health': 'Health check',
            'GET /api/docs/': 'Interactive API documentation',
            'GET /api/schema/': 'OpenAPI schema',
        },
        'categories': CATEGORY_CHOICES,
        'priorities': PRIORITY_CHOICES
    })
