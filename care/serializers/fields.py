import html

import bleach
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers


def clean_text(v):
    """Strip markup from free text submitted by the public website.

    bleach escapes what it keeps; the text is stored as typed, so entities
    are decoded again (``Tom & Jerry`` stays ``Tom & Jerry``).
    """
    return html.unescape(bleach.clean((v or '').strip(), strip=True))


class CleanCharField(serializers.CharField):
    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class LooseDateField(serializers.DateField):
    """A calendar date given as ``YYYY-MM-DD`` or as a full ISO datetime.

    Browsers often post ``2024-05-01T00:00:00.000Z``; only the date in
    the clinic's time zone is kept.  Blank input means "not given".
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        if value in ('', None):
            return None
        if isinstance(value, str) and 'T' in value:
            parsed = parse_datetime(value)
            if parsed is None:
                self.fail('invalid', format='YYYY-MM-DD')
            if timezone.is_aware(parsed):
                parsed = timezone.localtime(parsed)
            return parsed.date()
        return super().to_internal_value(value)
