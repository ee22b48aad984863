"""Configuration partagée des tests : base SQLite en mémoire et client HTTP."""

import os
import tempfile
from decimal import Decimal

# Avant tout import de l'application : les settings sont lus à l'import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["CRON_SECRET"] = "cron-test-secret"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "nafa-tests", "nafa.log")

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, get_db, get_engine
from app.core.security import create_access_token, get_password_hash
from app.core.session import issue_session_token
from app.main import app
from app.models import (
    Client,
    Gestionnaire,
    MemberStatus,
    Produit,
    Role,
    User,
    Wallet,
)


PASSWORD = "Secret123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def db():
    """Session sur un schéma recréé pour chaque test."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Client HTTP dont les routes partagent la session du test."""
    def override_get_db():
        try:
            yield db
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Fabrique de membres, avec portefeuille et rôle de gestionnaire optionnel."""
    counter = {"n": 0}

    def _make_user(
        role=Role.USER.value,
        gestionnaire_role=None,
        nom="Traore",
        prenom="Awa",
        solde_general=Decimal("0"),
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            nom=nom,
            prenom=prenom,
            email=f"membre{n}@nafa-coop.org",
            telephone=f"+22370000{n:03d}",
            hashed_password=PASSWORD_HASH,
            role=role,
            etat=MemberStatus.ACTIF.value,
        )
        db.add(user)
        db.flush()
        db.add(Wallet(member_id=user.id, solde_general=solde_general))
        if gestionnaire_role:
            db.add(Gestionnaire(member_id=user.id, role=gestionnaire_role, actif=True))
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_produit(db):
    def _make_produit(nom="Riz 25kg", prix_unitaire=Decimal("1000"), stock=10, alerte_stock=2) -> Produit:
        produit = Produit(nom=nom, prix_unitaire=prix_unitaire, stock=stock, alerte_stock=alerte_stock)
        db.add(produit)
        db.commit()
        db.refresh(produit)
        return produit

    return _make_produit


@pytest.fixture
def make_client_record(db):
    def _make_client(nom="Keita", prenom="Moussa", telephone="+22376000001") -> Client:
        record = Client(nom=nom, prenom=prenom, telephone=telephone, etat=MemberStatus.ACTIF.value)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make_client


@pytest.fixture
def auth_headers():
    """En-têtes portant la session d'un utilisateur."""
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_session_token(user)}"}

    return _auth_headers


@pytest.fixture
def raw_auth_headers():
    """En-têtes d'une session arbitraire (identifiant non numérique, rôle inconnu...)."""
    def _raw_auth_headers(user_id, role=Role.USER.value, gestionnaire_role=None) -> dict:
        token = create_access_token(subject=user_id, role=role, gestionnaire_role=gestionnaire_role)
        return {"Authorization": f"Bearer {token}"}

    return _raw_auth_headers
