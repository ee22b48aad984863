"""Espace magasinier et gardes des espaces de gestionnaire sur l'API."""

from app.models import AuditLog, MouvementStock, Notification


def test_reception_stock(client, db, make_user, make_produit, auth_headers):
    magasinier = make_user(gestionnaire_role="MAGAZINIER", prenom="Oumar")
    rpv = make_user(gestionnaire_role="RESPONSABLE_POINT_DE_VENTE", prenom="Fanta")
    caissier = make_user(gestionnaire_role="CAISSIER", prenom="Ali")
    produit = make_produit(stock=5)

    response = client.post(
        f"/api/magasinier/stock/{produit.id}/ajustement",
        json={"type": "ENTREE", "quantite": 20, "motif": "Livraison fournisseur"},
        headers=auth_headers(magasinier),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["produit"]["stock"] == 25
    assert data["mouvement"]["type"] == "ENTREE"
    assert data["mouvement"]["quantite"] == 20
    assert data["mouvement"]["motif"] == "Livraison fournisseur (par Oumar Traore)"
    assert data["mouvement"]["reference"].startswith("MAG-REC-")

    audit = db.query(AuditLog).filter(AuditLog.action == "RECEPTION_STOCK_MAGASINIER").one()
    assert audit.user_id == magasinier.id
    assert db.query(Notification).filter(Notification.user_id == rpv.id).count() == 1
    assert db.query(Notification).filter(Notification.user_id == caissier.id).count() == 0


def test_ajustement_negatif(client, db, make_user, make_produit, auth_headers):
    magasinier = make_user(gestionnaire_role="MAGAZINIER")
    produit = make_produit(stock=10)

    response = client.post(
        f"/api/magasinier/stock/{produit.id}/ajustement",
        json={"type": "AJUSTEMENT", "quantite": -4, "motif": "Casse"},
        headers=auth_headers(magasinier),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["produit"]["stock"] == 6
    assert data["mouvement"]["quantite"] == 4
    assert data["mouvement"]["reference"].startswith("MAG-ADJ-")


def test_ajustement_cannot_make_stock_negative(client, db, make_user, make_produit, auth_headers):
    magasinier = make_user(gestionnaire_role="MAGAZINIER")
    produit = make_produit(stock=2)

    response = client.post(
        f"/api/magasinier/stock/{produit.id}/ajustement",
        json={"type": "AJUSTEMENT", "quantite": -5, "motif": "Inventaire"},
        headers=auth_headers(magasinier),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Le stock ne peut pas devenir negatif"}
    db.refresh(produit)
    assert produit.stock == 2
    assert db.query(MouvementStock).count() == 0


def test_ajustement_unknown_product(client, make_user, auth_headers):
    magasinier = make_user(gestionnaire_role="MAGAZINIER")

    response = client.post(
        "/api/magasinier/stock/999/ajustement",
        json={"type": "ENTREE", "quantite": 1, "motif": "Livraison"},
        headers=auth_headers(magasinier),
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Produit introuvable"}


def test_magasinier_space_has_no_admin_access(client, make_user, make_produit, auth_headers):
    admin = make_user(role="ADMIN")
    produit = make_produit()

    response = client.get(f"/api/magasinier/stock/{produit.id}", headers=auth_headers(admin))

    assert response.status_code == 403
    assert response.json() == {"error": "Acces refuse"}


def test_magasinier_space_requires_session(client, make_produit):
    produit = make_produit()
    response = client.get(f"/api/magasinier/stock/{produit.id}")
    assert response.status_code == 401


def test_caissier_space_admits_admin(client, make_user, auth_headers):
    admin = make_user(role="SUPER_ADMIN")
    response = client.get("/api/caissier/dashboard", headers=auth_headers(admin))
    assert response.status_code == 200


def test_caissier_space_rejects_other_gestionnaire(client, make_user, auth_headers):
    comptable = make_user(gestionnaire_role="COMPTABLE")
    response = client.get("/api/caissier/dashboard", headers=auth_headers(comptable))
    assert response.status_code == 403


def test_inactive_gestionnaire_loses_capability(client, db, make_user, auth_headers):
    magasinier = make_user(gestionnaire_role="MAGAZINIER")
    magasinier.gestionnaire.actif = False
    db.commit()

    response = client.get("/api/magasinier/stock/1", headers=auth_headers(magasinier))

    assert response.status_code == 403
