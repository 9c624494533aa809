"""
Appointment status workflow

Setting a status persists it immediately, then sends the email templates
registered for that status and, for completed paid services, runs the
payment placeholder. Emails are best effort: a failed send is reported in
the result and never undoes the status change. Nothing is deduplicated, so
repeating a status sends its emails again.
"""
from flask import current_app
from agenda import db
from agenda.models.appointment import (
    STATUS_PENDING, STATUS_ACCEPTED, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_REJECTED
)
from agenda.appointments.payments import process_payment
from agenda.utils.email import send_template_email
from agenda.utils.common import format_price

# status -> (subject title, template name)
CLIENT_TEMPLATES = {
    STATUS_PENDING: ('Marcação Criada', 'appointment_created'),
    STATUS_ACCEPTED: ('Marcação Confirmada', 'appointment_confirmed'),
    STATUS_CONFIRMED: ('Marcação Confirmada', 'appointment_confirmed'),
    STATUS_REJECTED: ('Marcação Rejeitada', 'appointment_rejected'),
    STATUS_COMPLETED: ('Serviço Concluído', 'appointment_completed'),
}

BUSINESS_TEMPLATES = {
    STATUS_PENDING: ('Nova Marcação', 'business_new_booking'),
}

def email_context(appointment):
    service = appointment.service
    symbol = current_app.config.get('CURRENCY_SYMBOL', '€')
    return {
        'appointment': appointment,
        'client': appointment.client,
        'staff': appointment.staff,
        'service': service,
        'business': appointment.business,
        'date': appointment.start_time.strftime('%d/%m/%Y'),
        'time': appointment.start_time.strftime('%H:%M'),
        'price': format_price(service.price, symbol) if service.price else None,
    }

def _send(result, recipient, address, template, appointment):
    title, template_name = template
    entry = {
        'type': 'email',
        'recipient': recipient,
        'template': title,
        'to': address,
        'sent': False,
    }
    if not address:
        message = f"No email address for {recipient}"
        entry['message'] = message
        result['errors'].append(message)
        result['notifications'].append(entry)
        return

    try:
        send_template_email(
            f"{title} - {appointment.service.name}",
            address,
            template_name,
            **email_context(appointment)
        )
        entry['sent'] = True
        entry['message'] = f"{title} enviado para {address}"
        result['emailsSent'] += 1
    except Exception as e:
        current_app.logger.error(f"Failed to send '{title}' for appointment {appointment.id}: {e}")
        entry['message'] = f"{title} falhou: {e}"
        result['errors'].append(f"{recipient} email failed: {e}")
    result['notifications'].append(entry)

def apply_status(appointment, status, send_email=True, notify_client=True, notify_business=True):
    """Persist a new status and run its side effects, returning the notification report"""
    previous_status = appointment.status
    appointment.status = status
    db.session.commit()
    current_app.logger.info(f"Appointment {appointment.id} status {previous_status} -> {status}")

    result = {
        'appointmentId': appointment.id,
        'previousStatus': previous_status,
        'status': status,
        'notifications': [],
        'emailsSent': 0,
        'paymentProcessed': False,
        'transactionId': None,
        'errors': [],
    }

    if send_email:
        if notify_client and status in CLIENT_TEMPLATES:
            _send(result, 'client', appointment.client.email, CLIENT_TEMPLATES[status], appointment)
        if notify_business and status in BUSINESS_TEMPLATES:
            _send(result, 'business', appointment.business.email, BUSINESS_TEMPLATES[status], appointment)

    price = appointment.service.price
    if status == STATUS_COMPLETED and price and price > 0:
        payment = process_payment(appointment, price)
        result['paymentProcessed'] = payment['success']
        result['transactionId'] = payment['transactionId']
        symbol = current_app.config.get('CURRENCY_SYMBOL', '€')
        result['notifications'].append({
            'type': 'payment',
            'recipient': 'business',
            'template': None,
            'sent': payment['success'],
            'message': f"Pagamento de {format_price(price, symbol)} processado ({payment['transactionId']})",
        })

    sent = [n['template'] for n in result['notifications'] if n['type'] == 'email' and n['sent']]
    log_line = f"Estado: {previous_status} -> {status}"
    if sent:
        log_line += f"; emails: {', '.join(sent)}"
    if result['paymentProcessed']:
        log_line += f"; pagamento {result['transactionId']}"
    appointment.append_log(log_line)
    db.session.commit()

    return result
