import time
from decimal import Decimal
from flask import current_app

def process_payment(appointment, amount, payment_method='card'):
    """
    Payment placeholder for completed appointments

    No provider is integrated yet: every call reports success with a
    generated transaction id so the completion workflow can be exercised.
    """
    amount = Decimal(amount)
    transaction_id = f"txn_{int(time.time() * 1000)}"
    current_app.logger.info(
        f"Processing payment of {amount} for appointment {appointment.id} ({payment_method})"
    )
    return {
        'success': True,
        'transactionId': transaction_id,
        'appointmentId': appointment.id,
        'clientId': appointment.client_id,
        'businessId': appointment.business_id,
        'amount': float(amount),
        'currency': 'EUR',
        'paymentMethod': payment_method,
    }
