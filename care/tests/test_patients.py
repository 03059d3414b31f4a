import pytest

from care.models import Patient
from care.services.visits import VisitLedger

pytestmark = pytest.mark.django_db


@pytest.fixture
def desk(make_user, client_for):
    return client_for(make_user('desk'))


def test_patients_require_authentication(api):
    assert api.get('/api/patients').status_code == 401
    assert api.post('/api/patients', {'name': 'X'}, format='json').status_code == 401


def test_create_and_list_newest_first(desk):
    r = desk.post('/api/patients', {'name': 'Old', 'phone': '1', 'gender': 'female'}, format='json')
    assert r.status_code == 201
    assert r.data['message'] == 'Patient registered successfully!'
    assert r.data['data']['status'] == 'New'
    assert r.data['data']['totalVisits'] == 0
    desk.post('/api/patients', {'name': 'New', 'email': 'NEW@example.com', 'dateOfBirth': '1990-02-03'},
              format='json')

    r = desk.get('/api/patients')
    assert [p['name'] for p in r.data['data']] == ['New', 'Old']
    assert r.data['data'][0]['email'] == 'new@example.com'
    assert r.data['data'][0]['dateOfBirth'] == '1990-02-03'

    r = desk.get('/api/patients', {'search': 'new@'})
    assert r.data['count'] == 1


def test_create_requires_name(desk):
    r = desk.post('/api/patients', {'phone': '1'}, format='json')
    assert r.status_code == 400
    assert 'Patient name is required' in r.data['message']


def test_ledger_fields_are_not_writable(desk):
    patient = Patient.objects.create(name='P', phone='1', total_visits=5, status=Patient.STATUS_REGULAR)
    r = desk.put(f'/api/patients/{patient.id}',
                 {'address': '1 Main St', 'totalVisits': 0, 'status': 'New'}, format='json')
    assert r.status_code == 200
    assert r.data['message'] == 'Patient updated.'
    patient.refresh_from_db()
    assert patient.address == '1 Main St'
    assert patient.total_visits == 5
    assert patient.status == Patient.STATUS_REGULAR


def test_get_and_delete(desk):
    patient = Patient.objects.create(name='P', phone='1')
    assert desk.get(f'/api/patients/{patient.id}').data['data']['name'] == 'P'
    r = desk.delete(f'/api/patients/{patient.id}')
    assert r.data['message'] == 'Patient deleted.'
    r = desk.get(f'/api/patients/{patient.id}')
    assert r.status_code == 404
    assert r.data['message'] == 'Patient not found.'


# ----------------------------------------------------------------------
# VisitLedger
# ----------------------------------------------------------------------
def test_first_patient_by_id_wins_on_shared_phone():
    first = Patient.objects.create(name='First', phone='555')
    second = Patient.objects.create(name='Second', phone='555')
    ledger = VisitLedger()

    assert ledger.record_completion_visit('555').pk == first.pk
    ledger.record_walk_in_visit('Someone', None, '555')

    first.refresh_from_db()
    second.refresh_from_db()
    assert first.total_visits == 2
    assert second.total_visits == 0


def test_walk_in_keeps_regular_status():
    Patient.objects.create(name='R', phone='9', total_visits=4, status=Patient.STATUS_REGULAR)
    patient = VisitLedger().record_walk_in_visit('R', '', '9')
    assert patient.total_visits == 5
    assert patient.status == Patient.STATUS_REGULAR


def test_completion_of_unknown_phone_is_a_no_op():
    assert VisitLedger().record_completion_visit('nobody') is None
    assert Patient.objects.count() == 0
