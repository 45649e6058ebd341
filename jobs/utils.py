# jobs/utils.py
import logging
import os
from io import BytesIO

from django.conf import settings
from django.contrib.staticfiles import finders
from django.template.loader import render_to_string
from xhtml2pdf import pisa

logger = logging.getLogger(__name__)


def link_callback(uri, rel):
    """
    Resolve static URIs in the rendered HTML to filesystem paths so xhtml2pdf
    can embed them. Anything else is handed back unchanged.
    """
    if uri.startswith('http://') or uri.startswith('https://'):
        return uri

    if uri.startswith(settings.STATIC_URL):
        path = finders.find(uri.replace(settings.STATIC_URL, '', 1))
        # finders.find may return list
        if isinstance(path, (list, tuple)):
            path = path[0] if path else None
    else:
        path = finders.find(uri)

    if not path or not os.path.isfile(path):
        return uri
    return path


def render_to_pdf(template_src, context_dict=None):
    """Render a template to PDF bytes, or None when pisa reports errors."""
    context_dict = context_dict or {}
    html = render_to_string(template_src, context_dict)
    result = BytesIO()
    pdf = pisa.CreatePDF(BytesIO(html.encode('utf-8')), dest=result, link_callback=link_callback)
    if pdf.err:
        logger.error("xhtml2pdf reported %s error(s) rendering %s", pdf.err, template_src)
        return None
    return result.getvalue()


def cv_filename(first_name, last_name):
    base = '_'.join(p for p in (first_name, last_name) if p) or 'cv'
    safe = ''.join(c if c.isalnum() or c in '-_' else '_' for c in base)
    return f"{safe}_CV.pdf"
