"""
Doctors, blog posts, reviews and contact messages.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from care.models import BlogPost, ContactMessage, Doctor, Review, User
from care.services.tokens import issue_token


class ContentAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='admin', password='adminpass', role='admin', name='Admin')
        self.desk = User.objects.create_user(username='desk', password='deskpass', role='receptionist', name='Desk')

    def _as(self, user) -> None:
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user.pk, user.role)}')

    # ------------------------------------------------------------------
    # doctors
    # ------------------------------------------------------------------
    def test_public_doctor_list_shows_active_only(self) -> None:
        Doctor.objects.create(name='Dr. A', specialty='GP')
        Doctor.objects.create(name='Dr. B', is_active=False)
        r = self.client.get('/api/doctors')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([d['name'] for d in r.data['data']], ['Dr. A'])

    def test_admin_manages_doctors(self) -> None:
        self._as(self.admin)
        r = self.client.post('/api/doctors', {'name': 'Dr. C', 'specialty': 'ENT'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        pk = r.data['data']['id']

        r = self.client.put(f'/api/doctors/{pk}', {'bio': 'Ears.'}, format='json')
        self.assertEqual(r.data['data']['bio'], 'Ears.')
        self.assertEqual(r.data['data']['specialty'], 'ENT')

        self.client.credentials()
        self.assertEqual(self.client.get(f'/api/doctors/{pk}').status_code, status.HTTP_200_OK)

        self._as(self.admin)
        self.assertEqual(self.client.delete(f'/api/doctors/{pk}').status_code, status.HTTP_200_OK)
        r = self.client.get(f'/api/doctors/{pk}')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_receptionist_cannot_add_doctor(self) -> None:
        self._as(self.desk)
        r = self.client.post('/api/doctors', {'name': 'Dr. C'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Doctor.objects.exists())

    # ------------------------------------------------------------------
    # blog
    # ------------------------------------------------------------------
    def test_blog_visibility(self) -> None:
        BlogPost.objects.create(title='Draft', content='...')
        published = BlogPost.objects.create(title='Live', content='...', is_published=True)

        r = self.client.get('/api/blog')
        self.assertEqual([p['title'] for p in r.data['data']], ['Live'])
        self.assertEqual(self.client.get(f'/api/blog/{published.id}').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get('/api/blog/all').status_code, status.HTTP_401_UNAUTHORIZED)

        self._as(self.desk)
        r = self.client.get('/api/blog/all')
        self.assertEqual(r.data['count'], 2)

    def test_admin_blog_crud(self) -> None:
        self._as(self.admin)
        r = self.client.post('/api/blog', {'title': 'Hello', 'content': 'World', 'isPublished': True},
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        pk = r.data['data']['id']
        r = self.client.put(f'/api/blog/{pk}', {'title': 'Hello again'}, format='json')
        self.assertEqual(r.data['message'], 'Post updated!')
        r = self.client.delete(f'/api/blog/{pk}')
        self.assertEqual(r.data['message'], 'Post deleted.')
        self.assertFalse(BlogPost.objects.exists())

    def test_blog_post_requires_title(self) -> None:
        self._as(self.admin)
        r = self.client.post('/api/blog', {'content': 'World'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data['success'])

    # ------------------------------------------------------------------
    # reviews
    # ------------------------------------------------------------------
    def test_review_flow(self) -> None:
        r = self.client.post('/api/reviews', {'patientName': 'Ann', 'message': 'Great care', 'rating': 5},
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertFalse(r.data['data']['isApproved'])
        pk = r.data['data']['id']
        self.assertEqual(self.client.get('/api/reviews').data['count'], 0)

        self._as(self.admin)
        self.assertEqual(self.client.get('/api/reviews/all').data['count'], 1)
        r = self.client.put(f'/api/reviews/{pk}/approve')
        self.assertEqual(r.data['message'], 'Review approved!')

        self.client.credentials()
        self.assertEqual(self.client.get('/api/reviews').data['count'], 1)

        self._as(self.admin)
        self.assertEqual(self.client.delete(f'/api/reviews/{pk}').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.delete(f'/api/reviews/{pk}').status_code, status.HTTP_404_NOT_FOUND)

    def test_review_validation(self) -> None:
        r = self.client.post('/api/reviews', {'patientName': 'Ann'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['message'], 'Name and message are required.')
        r = self.client.post('/api/reviews', {'patientName': 'Ann', 'message': 'x', 'rating': 9}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Review.objects.exists())

    # ------------------------------------------------------------------
    # contact
    # ------------------------------------------------------------------
    def test_contact_accepts_name_or_full_name(self) -> None:
        r = self.client.post('/api/contact', {'name': 'Bob', 'email': 'BOB@example.com', 'message': 'Hi'},
                             format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['fullName'], 'Bob')
        self.assertEqual(r.data['data']['email'], 'bob@example.com')

        r = self.client.post('/api/contact', {'fullName': 'Bob', 'message': 'Hi'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['message'], 'Please fill in your name, email, and message.')

    def test_admin_reads_and_deletes_messages(self) -> None:
        msg = ContactMessage.objects.create(full_name='Bob', email='b@example.com', message='Hi')
        self.assertEqual(self.client.get('/api/contact').status_code, status.HTTP_401_UNAUTHORIZED)

        self._as(self.desk)
        self.assertEqual(self.client.get('/api/contact').status_code, status.HTTP_403_FORBIDDEN)

        self._as(self.admin)
        r = self.client.get('/api/contact')
        self.assertEqual(r.data['count'], 1)
        r = self.client.put(f'/api/contact/{msg.id}/read')
        self.assertTrue(r.data['data']['isRead'])
        r = self.client.delete(f'/api/contact/{msg.id}')
        self.assertEqual(r.data['message'], 'Message deleted.')
        self.assertFalse(ContactMessage.objects.exists())

    def test_api_index_and_health(self) -> None:
        r = self.client.get('/api')
        self.assertTrue(r.json()['success'])
        self.assertIn('appointments', r.json()['endpoints'])
        r = self.client.get('/healthz')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertTrue(r.json()['db'])
