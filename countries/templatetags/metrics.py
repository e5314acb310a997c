from django import template
from django.utils.html import format_html

from countries.data import flag_url as _flag_url

register = template.Library()


@register.filter
def flag_url(code, size=24):
    return _flag_url(code, int(size))


@register.simple_tag
def metric_link(cell):
    """Render a formatted metric value as a link to its source."""
    metric = cell.metric
    if not metric.url:
        return format_html('<span class="metric-link" title="{}">{}</span>', metric.title, cell.text)
    return format_html(
        '<a href="{}" target="_blank" rel="noopener" class="metric-link" title="{}">{}</a>',
        metric.url, metric.title, cell.text,
    )
