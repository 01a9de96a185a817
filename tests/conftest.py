import os

# Must be set before salonboard is imported: the module-level engine reads it
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from salonboard.database import Base, build_engine, get_db  # noqa: E402
from salonboard.domain.scheduling.occupancy import Booking  # noqa: E402
from salonboard.main import app  # noqa: E402
from salonboard.models import Client, Product, Service, Staff  # noqa: E402

BOARD_DAY = date(2026, 3, 1)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def seed_salon(db_session):
    """Two staff columns, a few services, one stock-tracked product with a single unit left"""
    amal = Staff(name="Amal", color="#f97316")
    sara = Staff(name="Sara", color="#0ea5e9")
    keratin = Product(name="Keratin", quantity=1, low_stock_threshold=2)
    dye = Product(name="Blond dye", quantity=10, low_stock_threshold=3)
    db_session.add_all([amal, sara, keratin, dye])
    db_session.flush()

    haircut = Service(name="Haircut", price=50, duration_minutes=30, category="Hair")
    blowdry = Service(name="Blow-dry", price=80, duration_minutes=60, category="Hair")
    smoothing = Service(
        name="Keratin smoothing", price=300, duration_minutes=90, category="Care",
        linked_product_id=keratin.id, loyalty_points_multiplier=2,
    )
    colour = Service(name="Colour", price=150, duration_minutes=45, category="Colour", linked_product_id=dye.id)
    regular = Client(name="Nadia", phone="+212600000001")
    db_session.add_all([haircut, blowdry, smoothing, colour, regular])
    db_session.commit()

    return {
        "amal": amal.id,
        "sara": sara.id,
        "keratin": keratin.id,
        "dye": dye.id,
        "haircut": haircut.id,
        "blowdry": blowdry.id,
        "smoothing": smoothing.id,
        "colour": colour.id,
        "nadia": regular.id,
    }


@pytest.fixture
def salon(db_session):
    return seed_salon(db_session)


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a file-backed SQLite database, built the way the app builds its engine"""
    engine = build_engine(f"sqlite:///{tmp_path / 'board.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def make_booking(id, start_time, duration, staff_id=1, day=BOARD_DAY):
    return Booking(id=id, staff_id=staff_id, date=day, start_time=start_time, duration_minutes=duration)
