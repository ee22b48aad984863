"""Services métier : crédits alimentaires automatiques, expirations, stock."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.responses import ApiError
from app.core.session import AuthSession
from app.models import (
    AuditLog,
    Cotisation,
    CreditAlimentaire,
    MouvementStock,
    Notification,
    StatutCreditAlim,
    Tontine,
    TontineCycle,
)
from app.models.cotisation import PeriodeCotisation, StatutCotisation
from app.models.tontine import FrequenceTontine, StatutCycle, StatutTontine
from app.services import (
    credit_alimentaire_service,
    dashboard_service,
    expiration_service,
    stock_service,
)


def cotisation_payee(db, member=None, client=None, montant=Decimal("3000")):
    cotisation = Cotisation(
        member_id=member.id if member else None,
        client_id=client.id if client else None,
        montant=montant,
        periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.PAYEE.value,
        date_paiement=datetime.utcnow(),
    )
    db.add(cotisation)
    db.flush()
    return cotisation


def test_credit_generated_from_cotisation(db, make_user):
    admin = make_user(role="ADMIN", prenom="Admin")
    member = make_user()
    cotisation = cotisation_payee(db, member=member)

    credit = credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)
    db.commit()

    assert credit.member_id == member.id
    assert credit.client_id is None
    assert credit.plafond == Decimal("3000")
    assert credit.montant_restant == Decimal("3000")
    assert credit.statut == StatutCreditAlim.ACTIF.value
    assert credit.source == "COTISATION"
    assert credit.date_expiration > datetime.utcnow() + timedelta(days=29)

    notification = db.query(Notification).filter(Notification.user_id == admin.id).one()
    assert notification.titre == "Credit alimentaire auto-genere"
    assert notification.action_url == f"/dashboard/admin/creditsAlimentaires/{credit.id}"


def test_credit_from_client_cotisation_belongs_to_client(db, make_client_record):
    record = make_client_record()
    cotisation = cotisation_payee(db, client=record)

    credit = credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)

    assert credit.client_id == record.id
    assert credit.member_id is None


def test_credit_not_duplicated_for_same_cotisation(db, make_user):
    member = make_user()
    cotisation = cotisation_payee(db, member=member)

    first = credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)
    second = credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)

    assert first is not None
    assert second is None
    assert db.query(CreditAlimentaire).count() == 1


def test_credit_generated_from_tontine_cycle(db, make_user):
    member = make_user()
    tontine = Tontine(
        nom="Tontine du marché",
        montant_cycle=Decimal("10000"),
        frequence=FrequenceTontine.MENSUEL.value,
        statut=StatutTontine.ACTIVE.value,
    )
    db.add(tontine)
    db.flush()
    cycle = TontineCycle(
        tontine_id=tontine.id,
        numero=1,
        beneficiaire_id=member.id,
        montant_pot=Decimal("50000"),
        statut=StatutCycle.COMPLETE.value,
    )
    db.add(cycle)
    db.flush()

    credit = credit_alimentaire_service.generer_depuis_tontine(db, cycle)

    assert credit.plafond == Decimal("50000")
    assert credit.source == "TONTINE"
    assert credit.source_id == cycle.id
    assert credit_alimentaire_service.generer_depuis_tontine(db, cycle) is None


def test_creer_credit_requires_owner(db):
    with pytest.raises(ApiError) as exc:
        credit_alimentaire_service.creer_credit(db, plafond=Decimal("1000"))
    assert exc.value.status_code == 400


def test_creer_credit_rejects_two_owners(db, make_user, make_client_record):
    member = make_user()
    record = make_client_record()

    with pytest.raises(ApiError) as exc:
        credit_alimentaire_service.creer_credit(
            db, plafond=Decimal("1000"), member_id=member.id, client_id=record.id
        )

    assert exc.value.status_code == 400
    assert db.query(CreditAlimentaire).count() == 0


def test_owner_constraint_rejects_two_owners(db, make_user, make_client_record):
    member = make_user()
    record = make_client_record()
    db.add(CreditAlimentaire(
        member_id=member.id,
        client_id=record.id,
        plafond=Decimal("1000"),
        montant_utilise=Decimal("0"),
        montant_restant=Decimal("1000"),
        statut=StatutCreditAlim.ACTIF.value,
    ))

    with pytest.raises(IntegrityError):
        db.flush()
    db.rollback()


def test_expirations(db, make_user):
    admin = make_user(role="SUPER_ADMIN", prenom="Admin")
    member = make_user()
    hier = datetime.utcnow() - timedelta(days=1)
    demain = datetime.utcnow() + timedelta(days=1)

    expiree = Cotisation(
        member_id=member.id, montant=Decimal("1000"), periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.EN_ATTENTE.value, date_expiration=hier,
    )
    valide = Cotisation(
        member_id=member.id, montant=Decimal("1000"), periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.EN_ATTENTE.value, date_expiration=demain,
    )
    payee = Cotisation(
        member_id=member.id, montant=Decimal("1000"), periode=PeriodeCotisation.MENSUEL.value,
        statut=StatutCotisation.PAYEE.value, date_expiration=hier,
    )
    credit_echu = credit_alimentaire_service.creer_credit(
        db, plafond=Decimal("500"), member_id=member.id, date_expiration=hier
    )
    credit_valide = credit_alimentaire_service.creer_credit(
        db, plafond=Decimal("500"), member_id=member.id, date_expiration=demain
    )
    db.add_all([expiree, valide, payee])
    db.commit()

    result = expiration_service.traiter_expirations(db)
    db.commit()

    assert result == {"cotisations_expirees": 1, "credits_expires": 1}
    assert expiree.statut == StatutCotisation.EXPIREE.value
    assert valide.statut == StatutCotisation.EN_ATTENTE.value
    assert payee.statut == StatutCotisation.PAYEE.value
    assert credit_echu.statut == StatutCreditAlim.EXPIRE.value
    assert credit_valide.statut == StatutCreditAlim.ACTIF.value

    assert db.query(Notification).filter(
        Notification.user_id == admin.id,
        Notification.titre == "Expirations automatiques",
    ).count() == 1
    assert db.query(AuditLog).filter(AuditLog.action == "EXPIRATION_AUTOMATIQUE").count() == 1


def test_expirations_nothing_to_do(db, make_user):
    make_user(role="ADMIN")

    result = expiration_service.traiter_expirations(db)

    assert result == {"cotisations_expirees": 0, "credits_expires": 0}
    assert db.query(Notification).count() == 0
    assert db.query(AuditLog).count() == 0


def test_creer_produit_records_initial_stock(db):
    produit = stock_service.creer_produit(db, nom="Huile 5L", prix_unitaire=Decimal("4500"), stock=12)
    db.commit()

    mouvement = db.query(MouvementStock).filter(MouvementStock.produit_id == produit.id).one()
    assert mouvement.type == "ENTREE"
    assert mouvement.quantite == 12
    assert mouvement.reference.startswith("INIT-")


def test_creer_produit_without_stock_has_no_movement(db):
    stock_service.creer_produit(db, nom="Sucre", prix_unitaire=Decimal("800"))
    assert db.query(MouvementStock).count() == 0


def test_statistiques_stock(db, make_produit):
    make_produit(nom="Riz", prix_unitaire=Decimal("1000"), stock=0, alerte_stock=2)
    make_produit(nom="Mil", prix_unitaire=Decimal("500"), stock=2, alerte_stock=5)
    make_produit(nom="Sel", prix_unitaire=Decimal("100"), stock=50, alerte_stock=5)

    stats = stock_service.statistiques(db)

    assert stats["total_produits"] == 3
    assert stats["en_rupture"] == 1
    assert stats["stock_faible"] == 1
    assert Decimal(stats["valeur_totale"]) == Decimal("6000")


@pytest.mark.parametrize(
    "type_mouvement, quantite, status",
    [
        ("SORTIE", 1, 400),
        ("ENTREE", 0, 400),
        ("ENTREE", -3, 400),
        ("AJUSTEMENT", 0, 400),
    ],
)
def test_ajuster_rejects_invalid_quantities(db, make_produit, type_mouvement, quantite, status):
    produit = make_produit()
    magasinier = AuthSession(user_id="1", role="USER", gestionnaire_role="MAGAZINIER")

    with pytest.raises(ApiError) as exc:
        stock_service.ajuster(db, magasinier, produit.id, type_mouvement, quantite, "Inventaire")
    assert exc.value.status_code == status


def test_ajuster_rejects_negative_stock(db, make_produit):
    produit = make_produit(stock=3)
    magasinier = AuthSession(user_id="1", role="USER", gestionnaire_role="MAGAZINIER")

    with pytest.raises(ApiError) as exc:
        stock_service.ajuster(db, magasinier, produit.id, "AJUSTEMENT", -4, "Casse")
    assert exc.value.message == "Le stock ne peut pas devenir negatif"


def test_dashboard_user(db, make_user):
    member = make_user(solde_general=Decimal("2500"))

    data = dashboard_service.get_dashboard_user(db, member.id)

    assert Decimal(data["solde_general"]) == Decimal("2500")
    assert data["tontines_actives"] == 0
