from agenda import db
from agenda.models import User


def new_staff(**overrides):
    body = {
        'email': 'carla@example.com',
        'name': 'Carla Mendes',
        'role': 'STANDARD',
        'password': 'segredo1',
    }
    body.update(overrides)
    return body


def test_owner_creates_staff_member(app, owner_client, seed):
    response = owner_client.post('/api/business/staff', json=new_staff(phone='+351 910 000 000'))

    assert response.status_code == 201
    member = response.get_json()['data']
    assert member['role'] == 'staff'
    assert member['staffRole'] == 'STANDARD'
    assert member['businessId'] == seed.business_id

    with app.app_context():
        assert db.session.get(User, member['id']).check_password('segredo1')


def test_new_staff_member_can_log_in(app, owner_client):
    owner_client.post('/api/business/staff', json=new_staff())

    response = app.test_client().post('/api/auth/login', json={
        'email': 'carla@example.com',
        'password': 'segredo1',
    })

    assert response.status_code == 200


def test_standard_staff_cannot_manage_staff(staff_client):
    response = staff_client.post('/api/business/staff', json=new_staff())

    assert response.status_code == 403


def test_duplicate_email_is_rejected(owner_client):
    response = owner_client.post('/api/business/staff', json=new_staff(email='maria@example.com'))

    assert response.status_code == 400
    error = response.get_json()['error']
    assert error['code'] == 'VALIDATION_ERROR'
    assert 'email' in error['details']


def test_invalid_role_is_rejected(owner_client):
    response = owner_client.post('/api/business/staff', json=new_staff(role='BOSS'))

    assert response.status_code == 400
    assert 'role' in response.get_json()['error']['details']


def test_update_staff_member(owner_client, seed):
    response = owner_client.put('/api/business/staff', json={
        'id': seed.staff_id,
        'name': 'Maria S. Santos',
        'role': 'MANAGER',
    })

    assert response.status_code == 200
    member = response.get_json()['data']
    assert member['name'] == 'Maria S. Santos'
    assert member['staffRole'] == 'MANAGER'


def test_delete_staff_member(owner_client, seed):
    response = owner_client.delete(f'/api/business/staff?id={seed.other_staff_id}')

    assert response.status_code == 200
    assert response.get_json()['message'] == 'Staff member deleted successfully'

    listed = owner_client.get('/api/business/staff').get_json()['data']
    assert seed.other_staff_id not in [m['id'] for m in listed]


def test_deleted_staff_member_cannot_log_in(app, owner_client, seed):
    owner_client.delete(f'/api/business/staff?id={seed.other_staff_id}')

    response = app.test_client().post('/api/auth/login', json={
        'email': 'rita@example.com',
        'password': 'secret123',
    })

    assert response.status_code == 403
    assert response.get_json()['error']['code'] == 'ACCOUNT_INACTIVE'


def test_delete_requires_id(owner_client):
    response = owner_client.delete('/api/business/staff')

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'MISSING_ID'


def test_admin_staff_cannot_delete_self(app, owner_client, seed):
    owner_client.put('/api/business/staff', json={'id': seed.staff_id, 'role': 'ADMIN'})
    admin = app.test_client()
    admin.post('/api/auth/login', json={'email': 'maria@example.com', 'password': 'secret123'})

    response = admin.delete(f'/api/business/staff?id={seed.staff_id}')

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'CANNOT_DELETE_SELF'


def test_category_crud(staff_client):
    created = staff_client.post('/api/staff/categories', json={'name': 'Cabelo', 'color': '#aa3366'})
    assert created.status_code == 201
    category_id = created.get_json()['data']['id']

    updated = staff_client.patch(f'/api/staff/categories/{category_id}', json={'description': 'Cortes e coloração'})
    assert updated.get_json()['data']['description'] == 'Cortes e coloração'
    assert updated.get_json()['data']['name'] == 'Cabelo'

    assert staff_client.delete(f'/api/staff/categories/{category_id}').status_code == 200
    listed = staff_client.get('/api/staff/categories').get_json()
    assert listed['data'] == []
    assert listed['meta']['total'] == 0

    assert staff_client.patch(f'/api/staff/categories/{category_id}', json={'name': 'X'}).status_code == 404


def test_category_requires_name(staff_client):
    response = staff_client.post('/api/staff/categories', json={'color': '#000000'})

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'INVALID_CATEGORY_DATA'


def test_categories_are_paginated(staff_client):
    for name in ('Cabelo', 'Unhas', 'Pele'):
        staff_client.post('/api/staff/categories', json={'name': name})

    first = staff_client.get('/api/staff/categories?page=1&limit=2').get_json()
    second = staff_client.get('/api/staff/categories?page=2&limit=2').get_json()

    assert len(first['data']) == 2
    assert first['meta'] == {'page': 1, 'limit': 2, 'total': 3, 'hasMore': True}
    assert len(second['data']) == 1
    assert second['meta']['hasMore'] is False


def test_audit_trail_is_scoped_to_business(owner_client, staff_client, outsider_client, seed):
    staff_client.post('/api/staff/categories', json={'name': 'Cabelo'})
    outsider_client.post('/api/staff/categories', json={'name': 'Barbearia'})

    response = owner_client.get('/api/business/audit-logs?entityType=category')

    assert response.status_code == 200
    body = response.get_json()
    assert body['meta']['total'] == 1
    entry = body['data'][0]
    assert entry['action'] == 'create'
    assert entry['businessId'] == seed.business_id
    assert entry['userId'] == seed.staff_id
    assert entry['details'] == {'name': 'Cabelo'}


def test_audit_trail_filters_by_user(owner_client, staff_client, other_staff_client, seed):
    staff_client.post('/api/staff/categories', json={'name': 'Cabelo'})
    other_staff_client.post('/api/staff/categories', json={'name': 'Unhas'})

    entries = owner_client.get(
        f'/api/business/audit-logs?entityType=category&userId={seed.other_staff_id}'
    ).get_json()['data']

    assert [e['details']['name'] for e in entries] == ['Unhas']


def test_audit_trail_requires_manager(staff_client):
    response = staff_client.get('/api/business/audit-logs')

    assert response.status_code == 403
