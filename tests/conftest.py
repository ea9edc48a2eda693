import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from cart_api.api import create_app
from cart_api.data.database import build_engine, get_db, init_db
from cart_api.data.seed import seed_catalog
from cart_api.repos.cart_repo import CartRepo
from cart_api.services.cart_service import CartService


@pytest.fixture()
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'cart.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    seed_catalog(db, force=True)
    yield db
    db.rollback()
    db.close()


@pytest.fixture()
def repo(session):
    return CartRepo(session)


@pytest.fixture()
def service(session):
    return CartService(session)


@pytest.fixture()
def client(session_factory, session):
    app = create_app(init_storage=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
