from django.urls import re_path
from . import views

urlpatterns = [
    re_path(r'^submit/?$', views.SubmitQuizView.as_view(), name='submit-quiz'),
    re_path(r'^my/(?P<course_id>\d+)/?$', views.MyQuizResultsView.as_view(), name='my-results'),
]
