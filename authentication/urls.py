from django.urls import path
from authentication.auth.views import UserLoginView, UserLogoutView, CurrentUserView

urlpatterns = [
    path('login/', UserLoginView.as_view(), name='login'),
    path('logout/', UserLogoutView.as_view(), name='logout'),
    path('me/', CurrentUserView.as_view(), name='current-user'),
]
