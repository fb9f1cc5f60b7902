from django.urls import path

from .views import UserProfileView, UserSettingsView

app_name = 'accounts'

urlpatterns = [
    path('me/', UserProfileView.as_view(), name='profile'),
    path('settings/', UserSettingsView.as_view(), name='settings'),
]
