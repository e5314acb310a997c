"""
URL configuration for the bigger_than_cali project.

All routes live in the countries app; see countries/urls.py.
"""
from django.http import HttpResponseNotFound, HttpResponseServerError
from django.urls import path, include

from countries.render import render_not_found, render_server_error

urlpatterns = [
    path('', include('countries.urls'))
]


def custom_404(request, exception):
    return HttpResponseNotFound(render_not_found(request.path.lstrip("/")))


def custom_500(request):
    return HttpResponseServerError(render_server_error())


handler404 = "bigger_than_cali.urls.custom_404"
handler500 = "bigger_than_cali.urls.custom_500"
