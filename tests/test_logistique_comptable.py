"""Espaces logistique et comptable."""

from datetime import datetime
from decimal import Decimal

from app.models import (
    Cotisation,
    CreditAlimentaire,
    MouvementStock,
    StatutCreditAlim,
    VenteCreditAlimentaire,
)
from app.models.cotisation import PeriodeCotisation, StatutCotisation


def test_logistique_stock_alerts(client, make_user, make_produit, auth_headers):
    logisticien = make_user(gestionnaire_role="AGENT_LOGISTIQUE_APPROVISIONNEMENT")
    rupture = make_produit(nom="Huile", stock=0)
    make_produit(nom="Sucre", stock=40, alerte_stock=5)

    response = client.get("/api/logistique/stock?alerte=true", headers=auth_headers(logisticien))

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == [rupture.id]


def test_logistique_has_no_admin_bypass(client, make_user, auth_headers):
    admin = make_user(role="SUPER_ADMIN")
    response = client.get("/api/logistique/stock", headers=auth_headers(admin))
    assert response.status_code == 403
    assert response.json() == {"error": "Acces refuse"}


def test_comptable_synthese(client, db, make_user, make_produit, auth_headers):
    comptable = make_user(gestionnaire_role="COMPTABLE")
    member = make_user()
    produit = make_produit(prix_unitaire=Decimal("500"))
    db.add(Cotisation(
        member_id=member.id,
        montant=Decimal("3000"),
        periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.PAYEE.value,
        date_paiement=datetime.utcnow(),
    ))
    credit = CreditAlimentaire(
        member_id=member.id,
        plafond=Decimal("3000"),
        montant_utilise=Decimal("1000"),
        montant_restant=Decimal("2000"),
        statut=StatutCreditAlim.ACTIF.value,
    )
    db.add(credit)
    db.flush()
    db.add(VenteCreditAlimentaire(
        credit_alimentaire_id=credit.id,
        produit_id=produit.id,
        quantite=2,
        prix_unitaire=Decimal("500"),
    ))
    db.commit()

    response = client.get("/api/comptable/synthese", headers=auth_headers(comptable))

    assert response.status_code == 200
    assert response.json()["data"] == {
        "cotisations_payees": {"nombre": 1, "montant": 3000},
        "credits_alimentaires": {"montant_accorde": 3000, "montant_consomme": 1000},
        "ventes": {"nombre": 1, "montant": 1000},
    }


def test_comptable_synthese_admin_bypass(client, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    response = client.get("/api/comptable/synthese", headers=auth_headers(admin))
    assert response.status_code == 200


def test_comptable_synthese_rejects_caissier(client, make_user, auth_headers):
    caissier = make_user(gestionnaire_role="CAISSIER")
    response = client.get("/api/comptable/synthese", headers=auth_headers(caissier))
    assert response.status_code == 403


def test_logistique_mouvements(client, db, make_user, make_produit, auth_headers):
    logisticien = make_user(gestionnaire_role="AGENT_LOGISTIQUE_APPROVISIONNEMENT")
    riz = make_produit(nom="Riz")
    mil = make_produit(nom="Mil")
    db.add_all([
        MouvementStock(produit_id=riz.id, type="ENTREE", quantite=10, reference="REC-1"),
        MouvementStock(produit_id=riz.id, type="SORTIE", quantite=2, reference="VTE-1"),
        MouvementStock(produit_id=mil.id, type="ENTREE", quantite=4, reference="REC-2"),
    ])
    db.commit()

    response = client.get(
        f"/api/logistique/mouvements?produit_id={riz.id}&type=ENTREE",
        headers=auth_headers(logisticien),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [m["reference"] for m in data["items"]] == ["REC-1"]
    assert data["meta"]["total"] == 1
