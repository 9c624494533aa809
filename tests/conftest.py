from datetime import datetime, time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from agenda import create_app, db
from agenda.config import TestingConfig
from agenda.models import Business, User, Service, Slot, Appointment
from agenda.models.user import ROLE_CLIENT, ROLE_STAFF, ROLE_OWNER, STAFF_STANDARD

PASSWORD = 'secret123'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seed(app):
    """One business with an owner, two staff members, clients, services and a Monday class"""
    with app.app_context():
        business = Business(name='Salão Teste', email='salao@example.com', phone='+351 912 345 678')
        other_business = Business(name='Outro Salão', email='outro@example.com')
        db.session.add_all([business, other_business])
        db.session.flush()

        owner = User(email='owner@example.com', name='Olga Dona', password=PASSWORD,
                     role=ROLE_OWNER, business_id=business.id)
        staff = User(email='maria@example.com', name='Maria Santos', password=PASSWORD,
                     role=ROLE_STAFF, business_id=business.id, staff_role=STAFF_STANDARD)
        other_staff = User(email='rita@example.com', name='Rita Costa', password=PASSWORD,
                           role=ROLE_STAFF, business_id=business.id, staff_role=STAFF_STANDARD)
        outsider = User(email='pedro@example.com', name='Pedro Lopes', password=PASSWORD,
                        role=ROLE_STAFF, business_id=other_business.id, staff_role=STAFF_STANDARD)
        client = User(email='joao@example.com', name='João Silva', password=PASSWORD,
                      role=ROLE_CLIENT, business_id=business.id)
        client2 = User(email='ana@example.com', name='Ana Sousa', password=PASSWORD,
                       role=ROLE_CLIENT, business_id=business.id)
        client3 = User(email='rui@example.com', name='Rui Alves', password=PASSWORD,
                       role=ROLE_CLIENT, business_id=business.id)
        ineligible = User(email='ines@example.com', name='Inês Reis', password=PASSWORD,
                          role=ROLE_CLIENT, business_id=business.id, is_eligible=False)
        db.session.add_all([owner, staff, other_staff, outsider, client, client2, client3, ineligible])
        db.session.flush()

        haircut = Service(business_id=business.id, name='Corte de Cabelo', duration_minutes=30,
                          price=Decimal('50.00'))
        consult = Service(business_id=business.id, name='Consulta', duration_minutes=30)
        pilates = Service(business_id=business.id, name='Pilates', duration_minutes=60,
                          price=Decimal('12.50'), description='Aula de grupo')
        db.session.add_all([haircut, consult, pilates])
        db.session.flush()

        slot = Slot(business_id=business.id, service_id=pilates.id, day_of_week=0,
                    start_time=time(9, 0), end_time=time(10, 0), capacity=2, staff_id=staff.id)
        db.session.add(slot)
        db.session.commit()

        return SimpleNamespace(
            business_id=business.id,
            other_business_id=other_business.id,
            owner_id=owner.id,
            staff_id=staff.id,
            other_staff_id=other_staff.id,
            outsider_id=outsider.id,
            client_id=client.id,
            client2_id=client2.id,
            client3_id=client3.id,
            ineligible_id=ineligible.id,
            haircut_id=haircut.id,
            consult_id=consult.id,
            pilates_id=pilates.id,
            slot_id=slot.id,
        )


def login(app, email):
    client = app.test_client()
    response = client.post('/api/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def staff_client(app, seed):
    return login(app, 'maria@example.com')


@pytest.fixture
def other_staff_client(app, seed):
    return login(app, 'rita@example.com')


@pytest.fixture
def outsider_client(app, seed):
    return login(app, 'pedro@example.com')


@pytest.fixture
def owner_client(app, seed):
    return login(app, 'owner@example.com')


@pytest.fixture
def customer_client(app, seed):
    return login(app, 'joao@example.com')


@pytest.fixture
def make_appointment(app, seed):
    """Insert an appointment directly and return its id"""
    def _make(start, duration=30, status='PENDING', staff_id=None, client_id=None, service_id=None):
        with app.app_context():
            appointment = Appointment(
                business_id=seed.business_id,
                client_id=client_id or seed.client_id,
                staff_id=staff_id or seed.staff_id,
                service_id=service_id or seed.haircut_id,
                start_time=start,
                duration=duration,
                status=status
            )
            db.session.add(appointment)
            db.session.commit()
            return appointment.id
    return _make


@pytest.fixture
def at():
    """Shorthand for a time on the Monday used throughout the tests"""
    def _at(hour, minute=0):
        return datetime(2030, 1, 7, hour, minute)
    return _at
