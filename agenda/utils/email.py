from flask import render_template
from flask_mail import Message
from agenda import mail

def send_email(subject, recipients, html_body, text_body=""):
    """General email sending function"""
    msg = Message(subject, recipients=recipients)
    msg.body = text_body
    msg.html = html_body
    mail.send(msg)

def send_template_email(subject, recipient, template, **context):
    """Render email/<template>.html and .txt and send them to one recipient"""
    send_email(
        subject,
        recipients=[recipient],
        html_body=render_template(f'email/{template}.html', **context),
        text_body=render_template(f'email/{template}.txt', **context)
    )
