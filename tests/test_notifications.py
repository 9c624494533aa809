import smtplib

from agenda import db, mail
from agenda.models import Appointment


def notify(client, appointment_id, **body):
    return client.post(f'/api/appointments/{appointment_id}/notifications', json=body)


def emails(result):
    return {n['template']: n for n in result['notifications'] if n['type'] == 'email'}


def test_pending_notifies_client_and_business(staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    with mail.record_messages() as outbox:
        response = notify(staff_client, appointment_id, status='PENDING')

    assert response.status_code == 200
    result = response.get_json()['data']
    sent = emails(result)
    assert sent['Marcação Criada']['recipient'] == 'client'
    assert sent['Marcação Criada']['to'] == 'joao@example.com'
    assert sent['Marcação Criada']['sent'] is True
    assert sent['Nova Marcação']['recipient'] == 'business'
    assert sent['Nova Marcação']['to'] == 'salao@example.com'
    assert sent['Nova Marcação']['sent'] is True
    assert result['emailsSent'] == 2
    assert result['errors'] == []

    assert sorted(m.recipients[0] for m in outbox) == ['joao@example.com', 'salao@example.com']
    assert any(m.subject == 'Marcação Criada - Corte de Cabelo' for m in outbox)
    assert all('07/01/2030' in m.body for m in outbox)


def test_confirmed_notifies_client_only(app, staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    with mail.record_messages() as outbox:
        response = notify(staff_client, appointment_id, status='CONFIRMED')

    result = response.get_json()['data']
    assert result['previousStatus'] == 'PENDING'
    assert result['status'] == 'CONFIRMED'
    assert list(emails(result)) == ['Marcação Confirmada']
    assert [m.recipients for m in outbox] == [['joao@example.com']]

    with app.app_context():
        appointment = db.session.get(Appointment, appointment_id)
        assert appointment.status == 'CONFIRMED'
        assert 'Estado: PENDING -> CONFIRMED; emails: Marcação Confirmada' in appointment.notes


def test_completed_paid_service_processes_payment(staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10), status='CONFIRMED')

    with mail.record_messages() as outbox:
        response = notify(staff_client, appointment_id, status='COMPLETED')

    result = response.get_json()['data']
    assert result['paymentProcessed'] is True
    assert result['transactionId'].startswith('txn_')
    payments = [n for n in result['notifications'] if n['type'] == 'payment']
    assert len(payments) == 1
    assert '€50' in payments[0]['message']
    assert '€50.00' not in payments[0]['message']
    assert [m.subject for m in outbox] == ['Serviço Concluído - Corte de Cabelo']


def test_completed_free_service_skips_payment(staff_client, seed, make_appointment, at):
    appointment_id = make_appointment(at(10), service_id=seed.consult_id)

    response = notify(staff_client, appointment_id, status='COMPLETED')

    result = response.get_json()['data']
    assert result['paymentProcessed'] is False
    assert result['transactionId'] is None
    assert not [n for n in result['notifications'] if n['type'] == 'payment']


def test_status_without_templates_sends_nothing(app, staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    with mail.record_messages() as outbox:
        response = notify(staff_client, appointment_id, status='CANCELLED')

    result = response.get_json()['data']
    assert result['notifications'] == []
    assert outbox == []
    with app.app_context():
        assert db.session.get(Appointment, appointment_id).status == 'CANCELLED'


def test_repeated_status_sends_emails_again(staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    with mail.record_messages() as outbox:
        notify(staff_client, appointment_id, status='CONFIRMED')
        notify(staff_client, appointment_id, status='CONFIRMED')

    assert len(outbox) == 2


def test_flags_suppress_recipients(staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    with mail.record_messages() as outbox:
        response = notify(staff_client, appointment_id, status='PENDING', notifyClient=False)
    assert [m.recipients for m in outbox] == [['salao@example.com']]
    assert response.get_json()['data']['emailsSent'] == 1

    with mail.record_messages() as outbox:
        notify(staff_client, appointment_id, status='PENDING', sendEmail=False)
    assert outbox == []


def test_email_failure_keeps_status(app, staff_client, make_appointment, at, monkeypatch):
    appointment_id = make_appointment(at(10))

    def broken_send(*args, **kwargs):
        raise smtplib.SMTPException('connection refused')

    monkeypatch.setattr('agenda.appointments.notifications.send_template_email', broken_send)

    response = notify(staff_client, appointment_id, status='CONFIRMED')

    assert response.status_code == 200
    result = response.get_json()['data']
    assert result['emailsSent'] == 0
    assert emails(result)['Marcação Confirmada']['sent'] is False
    assert any('connection refused' in e for e in result['errors'])
    with app.app_context():
        assert db.session.get(Appointment, appointment_id).status == 'CONFIRMED'


def test_unknown_status_is_rejected(staff_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    response = notify(staff_client, appointment_id, status='ARCHIVED')

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'INVALID_STATUS'


def test_other_business_cannot_notify(outsider_client, make_appointment, at):
    appointment_id = make_appointment(at(10))

    response = notify(outsider_client, appointment_id, status='CONFIRMED')

    assert response.status_code == 404
