def add_note(client, client_id, **body):
    return client.post(f'/api/staff/clients/{client_id}/notes', json=body)


def test_staff_adds_note(staff_client, seed):
    response = add_note(staff_client, seed.client_id, content='Prefere marcações de manhã', noteType='PREFERENCE')

    assert response.status_code == 201
    note = response.get_json()['data']
    assert note['createdById'] == seed.staff_id
    assert note['createdBy']['name'] == 'Maria Santos'
    assert note['noteType'] == 'PREFERENCE'
    assert note['canEdit'] is True


def test_note_type_defaults_to_general(staff_client, seed):
    response = add_note(staff_client, seed.client_id, content='Primeira visita')

    assert response.get_json()['data']['noteType'] == 'GENERAL'


def test_content_is_required(staff_client, seed):
    response = add_note(staff_client, seed.client_id, noteType='GENERAL')

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'CONTENT_REQUIRED'


def test_unknown_note_type_is_rejected(staff_client, seed):
    response = add_note(staff_client, seed.client_id, content='x', noteType='GOSSIP')

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'INVALID_NOTE'


def test_note_can_reference_clients_appointment(staff_client, seed, make_appointment, at):
    appointment_id = make_appointment(at(10))

    response = add_note(staff_client, seed.client_id, content='Alergia a amoníaco', appointmentId=appointment_id)

    assert response.status_code == 201
    assert response.get_json()['data']['appointmentId'] == appointment_id


def test_note_cannot_reference_another_clients_appointment(staff_client, seed, make_appointment, at):
    appointment_id = make_appointment(at(10), client_id=seed.client2_id)

    response = add_note(staff_client, seed.client_id, content='x', appointmentId=appointment_id)

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'INVALID_APPOINTMENT'


def test_notes_listed_with_edit_rights_per_viewer(staff_client, other_staff_client, seed):
    add_note(staff_client, seed.client_id, content='Nota da Maria')
    add_note(other_staff_client, seed.client_id, content='Nota da Rita')

    notes = staff_client.get(f'/api/staff/clients/{seed.client_id}/notes').get_json()['data']

    assert [n['content'] for n in notes] == ['Nota da Rita', 'Nota da Maria']
    assert {n['content']: n['canEdit'] for n in notes} == {'Nota da Rita': False, 'Nota da Maria': True}


def test_only_author_can_edit(staff_client, other_staff_client, seed):
    note = add_note(staff_client, seed.client_id, content='Primeira versão').get_json()['data']
    url = f"/api/staff/clients/{seed.client_id}/notes/{note['id']}"

    denied = other_staff_client.put(url, json={'content': 'Alterada'})
    assert denied.status_code == 403
    assert denied.get_json()['error']['code'] == 'FORBIDDEN'

    allowed = staff_client.put(url, json={'content': 'Alterada', 'noteType': 'FOLLOW_UP'})
    assert allowed.status_code == 200
    assert allowed.get_json()['data']['content'] == 'Alterada'
    assert allowed.get_json()['data']['noteType'] == 'FOLLOW_UP'


def test_only_author_can_delete(staff_client, other_staff_client, seed):
    note = add_note(staff_client, seed.client_id, content='Para apagar').get_json()['data']
    url = f"/api/staff/clients/{seed.client_id}/notes/{note['id']}"

    assert other_staff_client.delete(url).status_code == 403
    assert staff_client.delete(url).status_code == 200
    assert staff_client.get(f'/api/staff/clients/{seed.client_id}/notes').get_json()['data'] == []


def test_appointment_notes(staff_client, seed, make_appointment, at):
    appointment_id = make_appointment(at(10))

    response = staff_client.post(f'/api/appointments/{appointment_id}/notes', json={'content': 'Chegou atrasada'})
    assert response.status_code == 201
    assert response.get_json()['data']['clientId'] == seed.client_id

    notes = staff_client.get(f'/api/appointments/{appointment_id}/notes').get_json()['data']
    assert [n['content'] for n in notes] == ['Chegou atrasada']


def test_notes_about_other_business_client_are_hidden(outsider_client, seed):
    response = outsider_client.get(f'/api/staff/clients/{seed.client_id}/notes')

    assert response.status_code == 404
