from django.urls import path

from . import views

app_name = 'partners'

urlpatterns = [
    path('register/', views.partner_register, name='partner_register'),
]
