from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('signup', views.signup, name='signup'),
    path('login', views.login, name='login'),
    path('me', views.me, name='me'),
]
