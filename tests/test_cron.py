"""Tâche quotidienne des expirations."""

from datetime import datetime, timedelta
from decimal import Decimal

from app.models import Cotisation
from app.models.cotisation import PeriodeCotisation, StatutCotisation


def test_cron_rejects_missing_secret(client):
    response = client.get("/api/cron/expirations")
    assert response.status_code == 401
    assert response.json() == {"error": "Non autorise"}


def test_cron_rejects_wrong_secret(client):
    response = client.get("/api/cron/expirations?secret=mauvais")
    assert response.status_code == 401


def test_cron_accepts_query_secret(client, db, make_user):
    member = make_user()
    cotisation = Cotisation(
        member_id=member.id,
        montant=Decimal("1000"),
        periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.EN_ATTENTE.value,
        date_expiration=datetime.utcnow() - timedelta(hours=1),
    )
    db.add(cotisation)
    db.commit()

    response = client.get("/api/cron/expirations?secret=cron-test-secret")

    assert response.status_code == 200
    assert response.json() == {"data": {"cotisations_expirees": 1, "credits_expires": 0}}
    db.refresh(cotisation)
    assert cotisation.statut == StatutCotisation.EXPIREE.value


def test_cron_accepts_bearer_secret(client):
    response = client.get(
        "/api/cron/expirations",
        headers={"Authorization": "Bearer cron-test-secret"},
    )
    assert response.status_code == 200


def test_cron_rejects_non_ascii_secret(client):
    response = client.get("/api/cron/expirations", params={"secret": "clé"})
    assert response.status_code == 401
    assert response.json() == {"error": "Non autorise"}


def test_expirations_outside_http(db, make_user):
    from app.services import expiration_service

    member = make_user()
    cotisation = Cotisation(
        member_id=member.id,
        montant=Decimal("1000"),
        periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.EN_ATTENTE.value,
        date_expiration=datetime.utcnow() - timedelta(days=2),
    )
    db.add(cotisation)
    db.commit()

    result = expiration_service.executer()

    assert result == {"cotisations_expirees": 1, "credits_expires": 0}
    db.expire_all()
    assert db.get(Cotisation, cotisation.id).statut == StatutCotisation.EXPIREE.value
