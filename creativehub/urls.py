from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

def home(request):
    return JsonResponse({
        "statusCode": 200,
        "success": True,
        "message": "CreativeHub API is running.",
        "data": None,
    })

urlpatterns = [
    path('', home),
    path('admin/', admin.site.urls),

    path('api/auth/', include(('students.urls', 'students'), namespace='students')),
    path('api/', include(('courses.urls', 'courses'), namespace='courses')),
    path('api/quiz/', include(('quizzes.urls', 'quizzes'), namespace='quizzes')),
    path('api/certificates/', include(('certificates.urls', 'certificates'), namespace='certificates')),
    path('api/', include(('webinars.urls', 'webinars'), namespace='webinars')),
    path('api/', include(('admin_panel.urls', 'admin_panel'), namespace='admin_panel')),
]

handler404 = 'core.views.page_not_found'
handler500 = 'core.views.server_error'
