from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.exceptions import NotFound
from care.models import ContactMessage
from care.permissions import IsAdmin
from care.serializers.content import ContactSerializer
from care.views.common import by_method, db_alias, iso, ok

logger = logging.getLogger(__name__)


def _messages():
    return ContactMessage.objects.using(db_alias())


def _get(pk: int) -> ContactMessage:
    msg = _messages().filter(pk=pk).first()
    if msg is None:
        raise NotFound('Message not found.')
    return msg


def _serialize(m: ContactMessage) -> dict:
    return {
        'id': m.id,
        'fullName': m.full_name,
        'email': m.email,
        'phone': m.phone,
        'message': m.message,
        'isRead': m.is_read,
        'createdAt': iso(m.created_at),
    }


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def submit_message(request):
    s = ContactSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    msg = _messages().create(**s.validated_data)
    logger.info('contact message %s received', msg.id)
    return ok(_serialize(msg), message='Thank you! Your message has been received.',
              status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def list_messages(request):
    return ok([_serialize(m) for m in _messages().order_by('-created_at', '-id')], count=True)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def mark_read(request, pk: int):
    msg = _get(pk)
    msg.is_read = True
    msg.save(using=db_alias(), update_fields=['is_read', 'updated_at'])
    return ok(_serialize(msg))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_message(request, pk: int):
    _get(pk).delete(using=db_alias())
    return ok(message='Message deleted.')


contact_root = by_method(GET=list_messages, POST=submit_message)
