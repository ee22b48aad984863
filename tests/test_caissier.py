"""Ventes en caisse contre un crédit alimentaire."""

from decimal import Decimal

from app.models import AuditLog, CreditAlimentaire, Notification, StatutCreditAlim


def credit_client(db, record, plafond=Decimal("10000")):
    credit = CreditAlimentaire(
        client_id=record.id,
        plafond=plafond,
        montant_utilise=Decimal("0"),
        montant_restant=plafond,
        statut=StatutCreditAlim.ACTIF.value,
    )
    db.add(credit)
    db.commit()
    return credit


def test_vente_caissier(client, db, make_user, make_produit, make_client_record, auth_headers):
    caissier = make_user(gestionnaire_role="CAISSIER")
    comptable = make_user(gestionnaire_role="COMPTABLE")
    produit = make_produit(prix_unitaire=Decimal("1500"), stock=10)
    credit = credit_client(db, make_client_record())

    response = client.post(
        "/api/caissier/ventes",
        json={"credit_alimentaire_id": credit.id, "produit_id": produit.id, "quantite": 2},
        headers=auth_headers(caissier),
    )

    assert response.status_code == 201
    assert response.json()["data"]["vendeur_id"] == caissier.id
    db.refresh(credit)
    assert credit.montant_restant == Decimal("7000")
    assert db.query(AuditLog).filter(AuditLog.action == "VENTE_CAISSIER").count() == 1
    assert db.query(Notification).filter(Notification.user_id == comptable.id).count() == 1

    dashboard = client.get("/api/caissier/dashboard", headers=auth_headers(caissier)).json()["data"]
    assert dashboard["ventes_du_jour"]["nombre"] == 1
    assert dashboard["mes_ventes_du_jour"]["nombre"] == 1


def test_vente_unknown_credit(client, make_user, make_produit, auth_headers):
    caissier = make_user(gestionnaire_role="CAISSIER")
    produit = make_produit()

    response = client.post(
        "/api/caissier/ventes",
        json={"credit_alimentaire_id": 404, "produit_id": produit.id, "quantite": 1},
        headers=auth_headers(caissier),
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Crédit alimentaire introuvable"}


def test_vente_on_expired_credit(client, db, make_user, make_produit, make_client_record, auth_headers):
    caissier = make_user(gestionnaire_role="CAISSIER")
    produit = make_produit()
    credit = credit_client(db, make_client_record())
    credit.statut = StatutCreditAlim.EXPIRE.value
    db.commit()

    response = client.post(
        "/api/caissier/ventes",
        json={"credit_alimentaire_id": credit.id, "produit_id": produit.id, "quantite": 1},
        headers=auth_headers(caissier),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Crédit alimentaire inactif"}


def test_rpv_dashboard(client, make_user, make_produit, auth_headers):
    rpv = make_user(gestionnaire_role="RESPONSABLE_POINT_DE_VENTE")
    vide = make_produit(nom="Riz", stock=0)
    faible = make_produit(nom="Mil", stock=1, alerte_stock=5)

    response = client.get("/api/rpv/dashboard", headers=auth_headers(rpv))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["produits_en_rupture"] == [vide.id]
    assert data["produits_stock_faible"] == [faible.id]
    assert data["equipe"] == 1


def test_agent_terrain_has_no_admin_access(client, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    response = client.get("/api/agentTerrain/clients", headers=auth_headers(admin))
    assert response.status_code == 403
