"""Administration des clients."""

from decimal import Decimal

from app.models import AuditLog, Client, CreditAlimentaire, StatutCreditAlim


def test_list_clients_requires_admin(client, make_user, auth_headers):
    member = make_user()
    response = client.get("/api/admin/clients", headers=auth_headers(member))
    assert response.status_code == 403
    assert response.json() == {"error": "Acces refuse"}


def test_list_clients_paginated_with_search(client, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    make_client_record(nom="Keita", telephone="+22376000001")
    make_client_record(nom="Diarra", telephone="+22376000002")

    response = client.get("/api/admin/clients?search=kei", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [c["nom"] for c in data["items"]] == ["Keita"]
    assert data["meta"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}


def test_pagination_limit_is_capped(client, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    response = client.get("/api/admin/clients?limit=100", headers=auth_headers(admin))
    assert response.status_code == 422


def test_get_unknown_client(client, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    response = client.get("/api/admin/clients/999", headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.json() == {"error": "Client introuvable"}


def test_update_client(client, db, make_user, make_client_record, auth_headers):
    admin = make_user(role="SUPER_ADMIN")
    record = make_client_record()

    response = client.patch(
        f"/api/admin/clients/{record.id}",
        json={"adresse": "Bamako, ACI 2000", "etat": "SUSPENDU"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["adresse"] == "Bamako, ACI 2000"
    assert data["etat"] == "SUSPENDU"
    assert db.query(AuditLog).filter(AuditLog.action == "MODIFICATION_CLIENT").count() == 1


def test_update_client_duplicate_phone(client, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    make_client_record(telephone="+22376000001")
    other = make_client_record(nom="Diarra", telephone="+22376000002")

    response = client.patch(
        f"/api/admin/clients/{other.id}",
        json={"telephone": "+22376000001"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Ce numéro de téléphone est déjà utilisé"}


def test_update_client_invalid_etat(client, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    record = make_client_record()

    response = client.patch(
        f"/api/admin/clients/{record.id}",
        json={"etat": "BANNI"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Etat invalide"}


def test_delete_client_without_activity(client, db, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    record = make_client_record()
    record_id = record.id

    response = client.delete(f"/api/admin/clients/{record_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert db.get(Client, record_id) is None


def test_delete_client_with_activity(client, db, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    record = make_client_record()
    db.add(CreditAlimentaire(
        client_id=record.id,
        plafond=Decimal("1000"),
        montant_utilise=Decimal("0"),
        montant_restant=Decimal("1000"),
        statut=StatutCreditAlim.ACTIF.value,
    ))
    db.commit()

    response = client.delete(f"/api/admin/clients/{record.id}", headers=auth_headers(admin))

    assert response.status_code == 409
    assert response.json() == {"error": "Impossible de supprimer un client ayant des activités"}


def test_create_client(client, db, make_user, auth_headers):
    admin = make_user(role="ADMIN")

    response = client.post(
        "/api/admin/clients",
        json={"nom": "Coulibaly", "prenom": "Fanta", "telephone": "+22376000009"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["full_name"] == "Fanta Coulibaly"
    assert data["etat"] == "ACTIF"
    assert db.query(AuditLog).filter(AuditLog.action == "CREATION_CLIENT").count() == 1


def test_create_client_duplicate_phone(client, make_user, make_client_record, auth_headers):
    admin = make_user(role="ADMIN")
    make_client_record(telephone="+22376000009")

    response = client.post(
        "/api/admin/clients",
        json={"nom": "Coulibaly", "prenom": "Fanta", "telephone": "+22376000009"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Ce numéro de téléphone est déjà utilisé"}
