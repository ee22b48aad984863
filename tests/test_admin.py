"""Administration des membres, gestionnaires, crédits alimentaires et journal d'audit."""

from decimal import Decimal

import pytest

from app.models import AuditLog, CreditAlimentaire, Gestionnaire, StatutCreditAlim
from app.models.finance import Credit, StatutCredit


def test_list_membres_with_filters(client, make_user, auth_headers):
    admin = make_user(role="ADMIN", nom="Admin")
    make_user(nom="Dembele")
    make_user(nom="Konate")

    response = client.get("/api/admin/membres?search=dembe", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [m["nom"] for m in data["items"]] == ["Dembele"]
    assert data["meta"]["total"] == 1

    admins = client.get("/api/admin/membres?role=ADMIN", headers=auth_headers(admin)).json()["data"]
    assert [m["id"] for m in admins["items"]] == [admin.id]


def test_list_membres_requires_admin(client, make_user, auth_headers):
    caissier = make_user(gestionnaire_role="CAISSIER")
    response = client.get("/api/admin/membres", headers=auth_headers(caissier))
    assert response.status_code == 403


def test_create_gestionnaire(client, db, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    member = make_user()

    response = client.post(
        "/api/admin/gestionnaires",
        json={"member_id": member.id, "role": "CAISSIER"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["data"]["member"]["id"] == member.id
    assert db.query(Gestionnaire).filter(Gestionnaire.member_id == member.id).one().actif is True


@pytest.mark.parametrize("cas, message", [
    ("inconnu", "Utilisateur introuvable"),
    ("deja", "Cet utilisateur est déjà gestionnaire"),
    ("role", "Rôle invalide"),
])
def test_create_gestionnaire_rejected(client, make_user, auth_headers, cas, message):
    admin = make_user(role="ADMIN")
    member = make_user(gestionnaire_role="COMPTABLE" if cas == "deja" else None)
    body = {
        "member_id": 999 if cas == "inconnu" else member.id,
        "role": "BOULANGER" if cas == "role" else "CAISSIER",
    }

    response = client.post("/api/admin/gestionnaires", json=body, headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json() == {"error": message}


def _credit(db, member, statut, plafond, restant):
    credit = CreditAlimentaire(
        member_id=member.id,
        plafond=plafond,
        montant_utilise=plafond - restant,
        montant_restant=restant,
        statut=statut.value,
    )
    db.add(credit)
    db.commit()
    return credit


def test_credits_alimentaires_filter_and_stats(client, db, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    member = make_user()
    actif = _credit(db, member, StatutCreditAlim.ACTIF, Decimal("5000"), Decimal("2000"))
    _credit(db, member, StatutCreditAlim.EPUISE, Decimal("1000"), Decimal("0"))

    response = client.get("/api/admin/creditsAlimentaires?statut=ACTIF", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [c["id"] for c in data["items"]] == [actif.id]
    assert data["items"][0]["montant_restant"] == 2000
    assert data["stats"] == {
        "total": 2,
        "actifs": 1,
        "epuises": 1,
        "expires": 0,
        "montant_plafond": 6000,
        "montant_utilise": 4000,
        "montant_restant": 2000,
    }


def test_audit_logs_filtered_by_action(client, db, make_user, auth_headers):
    admin = make_user(role="SUPER_ADMIN")
    db.add_all([
        AuditLog(user_id=admin.id, action="CREATION_CLIENT", entite="Client", entite_id=1),
        AuditLog(user_id=admin.id, action="VENTE_CAISSIER", entite="VenteCreditAlimentaire", entite_id=4),
    ])
    db.commit()

    response = client.get("/api/admin/auditLogs?action=VENTE_CAISSIER", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["meta"]["total"] == 1
    assert data["items"][0]["entite_id"] == 4

    complet = client.get("/api/admin/auditLogs", headers=auth_headers(admin)).json()["data"]
    assert complet["meta"]["total"] == 2


def test_audit_logs_require_admin(client, make_user, auth_headers):
    member = make_user()
    response = client.get("/api/admin/auditLogs", headers=auth_headers(member))
    assert response.status_code == 403


def test_list_credits_classiques(client, db, make_user, auth_headers):
    admin = make_user(role="ADMIN")
    member = make_user()
    db.add_all([
        Credit(member_id=member.id, montant=Decimal("20000"), statut=StatutCredit.APPROUVE.value),
        Credit(member_id=member.id, montant=Decimal("5000"), statut=StatutCredit.REJETE.value),
    ])
    db.commit()

    response = client.get("/api/admin/credits?statut=APPROUVE", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["meta"]["total"] == 1
    assert data["items"][0]["montant"] == 20000
