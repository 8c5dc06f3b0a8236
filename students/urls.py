from django.urls import re_path
from .views import (
    RegisterView, CustomAuthToken, UserProfileView, LogoutView, ChangeRoleView,
)

urlpatterns = [
    re_path(r'^register/?$', RegisterView.as_view(), name='register'),
    re_path(r'^login/?$', CustomAuthToken.as_view(), name='login'),
    re_path(r'^logout/?$', LogoutView.as_view(), name='logout'),
    re_path(r'^me/?$', UserProfileView.as_view(), name='user-profile'),
    re_path(r'^change-role/?$', ChangeRoleView.as_view(), name='change-role'),
]
