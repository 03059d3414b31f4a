from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.exceptions import NotFound
from care.models import BlogPost
from care.permissions import IsAdmin
from care.serializers.content import BlogPostSerializer
from care.views.common import by_method, db_alias, iso, ok


def _posts():
    return BlogPost.objects.using(db_alias())


def _get(pk: int) -> BlogPost:
    post = _posts().filter(pk=pk).first()
    if post is None:
        raise NotFound('Blog post not found.')
    return post


def _serialize(p: BlogPost) -> dict:
    return {
        'id': p.id,
        'title': p.title,
        'content': p.content,
        'image': p.image,
        'isPublished': p.is_published,
        'createdAt': iso(p.created_at),
        'updatedAt': iso(p.updated_at),
    }


def _newest_first(qs):
    return [_serialize(p) for p in qs.order_by('-created_at', '-id')]


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def list_published(request):
    return ok(_newest_first(_posts().filter(is_published=True)), count=True)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_all_posts(request):
    """Drafts included, for the dashboard."""
    return ok(_newest_first(_posts()), count=True)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def create_post(request):
    s = BlogPostSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    post = _posts().create(**s.validated_data)
    return ok(_serialize(post), message='Blog post created!', status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def get_post(request, pk: int):
    return ok(_serialize(_get(pk)))


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def change_post(request, pk: int):
    post = _get(pk)
    if request.method == 'PUT':
        s = BlogPostSerializer(post, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        for field, value in s.validated_data.items():
            setattr(post, field, value)
        post.save(using=db_alias())
        return ok(_serialize(post), message='Post updated!')
    # DELETE
    post.delete(using=db_alias())
    return ok(message='Post deleted.')


blog_root = by_method(GET=list_published, POST=create_post)
blog_detail = by_method(GET=get_post, PUT=change_post, DELETE=change_post)
