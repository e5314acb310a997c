import logging
import os

from django.conf import settings
from django.http import FileResponse, HttpResponse, HttpResponseNotFound
from django.views.decorators.http import require_safe
from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import data
from .render import render_comparison, render_home, render_not_found
from .serializers import StatusSerializer

logger = logging.getLogger(__name__)


def site_mode(request):
    """Hostnames carrying the "smaller" marker get the Smaller Than Cali copy."""
    hostname = request.get_host().split(":")[0]
    if settings.SMALLER_HOST_MARKER in hostname:
        return "smaller"
    return "bigger"


@require_safe
def home(request):
    """
    GET /
    List every country in the dataset, linked by canonical name.
    """
    return HttpResponse(render_home(data.get_dataset(), site_mode(request)))


@require_safe
def favicon(request):
    """
    GET /favicon.ico, /favicon.png
    Serve the bundled PNG icon, or an empty 204 if it is not installed.
    """
    path = settings.FAVICON_PATH
    if not os.path.exists(path):
        return HttpResponse(status=204)
    response = FileResponse(open(path, 'rb'), content_type='image/png')
    response["Cache-Control"] = "public, max-age=86400"
    return response


@require_safe
def compare_country(request, name):
    """
    GET /<name>
    Django has already URL-decoded the path. Matches canonical names and
    aliases case-insensitively; anything else gets the not-found page.
    """
    mode = site_mode(request)
    country = data.lookup_country(name)
    if country is None:
        logger.info("No country matches %r", name)
        return HttpResponseNotFound(render_not_found(name, mode))
    return HttpResponse(render_comparison(country, data.get_dataset().reference, mode))


@api_view(['GET'])
def get_status(request):
    """
    GET /api/status -> { total_countries, reference, generated }
    """
    serializer = StatusSerializer.from_dataset(data.get_dataset())
    return Response(serializer.data)
