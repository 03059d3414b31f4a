"""
Patient reviews.  Anyone may submit one; it only shows on the website
once an admin approves it.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.exceptions import NotFound
from care.models import Review
from care.permissions import IsAdmin
from care.serializers.content import ReviewSerializer
from care.views.common import by_method, db_alias, iso, ok


def _reviews():
    return Review.objects.using(db_alias())


def _get(pk: int) -> Review:
    review = _reviews().filter(pk=pk).first()
    if review is None:
        raise NotFound('Review not found.')
    return review


def _serialize(r: Review) -> dict:
    return {
        'id': r.id,
        'patientName': r.patient_name,
        'message': r.message,
        'rating': r.rating,
        'isApproved': r.is_approved,
        'createdAt': iso(r.created_at),
    }


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def submit_review(request):
    s = ReviewSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    review = _reviews().create(**s.validated_data)
    return ok(
        _serialize(review),
        message='Thank you for your review! It will appear after approval.',
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def approved_reviews(request):
    qs = _reviews().filter(is_approved=True).order_by('-created_at', '-id')
    return ok([_serialize(r) for r in qs], count=True)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def all_reviews(request):
    return ok([_serialize(r) for r in _reviews().order_by('-created_at', '-id')], count=True)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def approve_review(request, pk: int):
    review = _get(pk)
    review.is_approved = True
    review.save(using=db_alias(), update_fields=['is_approved', 'updated_at'])
    return ok(_serialize(review), message='Review approved!')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_review(request, pk: int):
    _get(pk).delete(using=db_alias())
    return ok(message='Review deleted.')


reviews_root = by_method(GET=approved_reviews, POST=submit_review)
