from django.urls import path
from . import views


urlpatterns = [
    # GET / → Home listing of all countries
    path('', views.home, name='home'),

    # GET /favicon.ico → Static icon (or 204)
    path('favicon.ico', views.favicon, name='favicon'),
    path('favicon.png', views.favicon, name='favicon_png'),

    # GET /api/status → Dataset summary
    path('api/status', views.get_status, name='get_status'),

    # GET /<country name> → Comparison page, or 404 page if nothing matches
    path('<path:name>', views.compare_country, name='compare_country'),
]
