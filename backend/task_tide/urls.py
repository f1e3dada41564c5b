"""
URL configuration for task_tide project.
"""

from django.urls import path, include
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView


def home_view(request):
    """Root endpoint with API information."""
    return JsonResponse({
        'message': 'Welcome to Task Tide API',
        'version': '1.0.0',
        'endpoints': {
            'API Root': '/api/',
            'Health': 'GET /api/health',
            'Tasks': '/api/tasks',
            'AI Suggestions': 'GET /api/ai/suggestions',
            'AI Analytics': 'GET /api/ai/analytics',
            'AI Prioritize': 'POST /api/ai/prioritize',
            'API Documentation': '/api/docs/',
            'OpenAPI Schema': '/api/schema/',
        },
    })


def not_found_view(request, exception=None):
    return JsonResponse(
        {'success': False, 'error': 'Route not found', 'message': f'Cannot {request.method} {request.path}'},
        status=404
    )


def server_error_view(request):
    return JsonResponse(
        {'success': False, 'error': 'Internal Server Error', 'message': 'Something went wrong'},
        status=500
    )


urlpatterns = [
    path('', home_view, name='home'),
    # OpenAPI/Swagger Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
    path('api/', include('tasks.urls')),
]

handler404 = not_found_view
handler500 = server_error_view
