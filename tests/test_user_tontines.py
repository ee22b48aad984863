"""Participation des membres aux tontines et historique du portefeuille."""

from decimal import Decimal

from app.models import Cotisation, Tontine, TontineMembre
from app.models.cotisation import PeriodeCotisation, StatutCotisation
from app.models.tontine import StatutTontine


def tontine(db, statut=StatutTontine.ACTIVE):
    item = Tontine(nom="Tontine des jeunes", montant_cycle=Decimal("1000"), statut=statut.value)
    db.add(item)
    db.commit()
    return item


def test_join_then_leave(client, db, make_user, auth_headers):
    premier = make_user()
    second = make_user()
    item = tontine(db)
    url = f"/api/user/tontines/{item.id}"

    assert client.post(f"{url}/join", headers=auth_headers(premier)).json()["data"]["ordre"] == 1
    response = client.post(f"{url}/join", headers=auth_headers(second))

    assert response.status_code == 201
    assert response.json()["data"]["ordre"] == 2

    again = client.post(f"{url}/join", headers=auth_headers(second))
    assert again.status_code == 400
    assert again.json() == {"error": "Déjà membre"}

    assert client.post(f"{url}/leave", headers=auth_headers(premier)).status_code == 200
    db.refresh(item)
    assert item.nombre_membres == 1

    listed = client.get("/api/user/tontines", headers=auth_headers(premier)).json()["data"]
    assert [(t["id"], t["participe"]) for t in listed] == [(item.id, False)]


def test_rejoin_reuses_participation(client, db, make_user, auth_headers):
    member = make_user()
    item = tontine(db)
    url = f"/api/user/tontines/{item.id}"

    client.post(f"{url}/join", headers=auth_headers(member))
    client.post(f"{url}/leave", headers=auth_headers(member))
    response = client.post(f"{url}/join", headers=auth_headers(member))

    assert response.status_code == 201
    assert response.json()["data"]["date_sortie"] is None
    assert db.query(TontineMembre).filter(TontineMembre.member_id == member.id).count() == 1


def test_join_inactive_tontine(client, db, make_user, auth_headers):
    member = make_user()
    item = tontine(db, statut=StatutTontine.BROUILLON)

    response = client.post(f"/api/user/tontines/{item.id}/join", headers=auth_headers(member))

    assert response.status_code == 400
    assert response.json() == {"error": "La tontine n'est pas active"}


def test_leave_without_participation(client, db, make_user, auth_headers):
    member = make_user()
    item = tontine(db)
    response = client.post(f"/api/user/tontines/{item.id}/leave", headers=auth_headers(member))
    assert response.status_code == 404


def test_transactions_after_paying_cotisation(client, db, make_user, auth_headers):
    member = make_user(solde_general=Decimal("5000"))
    other = make_user(solde_general=Decimal("5000"))
    cotisation = Cotisation(
        member_id=member.id,
        montant=Decimal("1500"),
        periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.EN_ATTENTE.value,
    )
    db.add(cotisation)
    db.commit()
    client.post(f"/api/user/cotisations/{cotisation.id}/pay", headers=auth_headers(member))

    response = client.get("/api/user/transactions", headers=auth_headers(member))

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["type"] == "COTISATION"
    assert data[0]["montant"] == 1500
    assert client.get("/api/user/transactions", headers=auth_headers(other)).json() == {"data": []}


def test_tontines_require_session(client):
    assert client.get("/api/user/tontines").status_code == 401
