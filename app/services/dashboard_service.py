"""
Indicateurs des tableaux de bord.
"""

from datetime import datetime, time
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.credit_alimentaire import VenteCreditAlimentaire
from app.models.finance import Credit, STATUTS_CREDIT_EN_COURS, Wallet
from app.models.produit import Produit
from app.models.tontine import StatutTontine, Tontine, TontineMembre
from app.models.user import Gestionnaire, MemberStatus, User


def _montant_ventes(query) -> Decimal:
    return query.with_entities(
        func.coalesce(func.sum(VenteCreditAlimentaire.prix_unitaire * VenteCreditAlimentaire.quantite), 0)
    ).scalar()


class DashboardService:

    def get_dashboard_admin(self, db: Session) -> Dict[str, Any]:
        """Membres actifs, tontines actives, crédits en cours et achats via crédits alimentaires."""
        membres_actifs = db.query(func.count(User.id)).filter(
            User.etat == MemberStatus.ACTIF.value
        ).scalar()

        tontines_actives = db.query(func.count(Tontine.id)).filter(
            Tontine.statut == StatutTontine.ACTIVE.value
        ).scalar()

        credits_en_cours = db.query(func.count(Credit.id)).filter(
            Credit.statut.in_(STATUTS_CREDIT_EN_COURS)
        ).scalar()

        ventes = db.query(VenteCreditAlimentaire)
        return {
            "membres_actifs": membres_actifs or 0,
            "tontines_actives": tontines_actives or 0,
            "credits_en_cours": credits_en_cours or 0,
            "achats_credit_alimentaire": {
                "nombre_achats": ventes.count(),
                "montant_total": _montant_ventes(ventes),
            },
        }

    def get_dashboard_user(self, db: Session, user_id: int) -> Dict[str, Any]:
        """Soldes du portefeuille et nombre de tontines actives du membre."""
        wallet = db.query(Wallet).filter(Wallet.member_id == user_id).first()

        tontines_actives = db.query(func.count(TontineMembre.id)).join(Tontine).filter(
            TontineMembre.member_id == user_id,
            Tontine.statut == StatutTontine.ACTIVE.value,
        ).scalar()

        return {
            "solde_general": wallet.solde_general if wallet else 0,
            "solde_tontine": wallet.solde_tontine if wallet else 0,
            "solde_credit": wallet.solde_credit if wallet else 0,
            "tontines_actives": tontines_actives or 0,
        }

    def ventes_du_jour(self, db: Session, vendeur_id: int = None) -> Dict[str, Any]:
        """Nombre et montant des ventes depuis minuit (éventuellement d'un seul vendeur)."""
        debut = datetime.combine(datetime.utcnow().date(), time.min)
        query = db.query(VenteCreditAlimentaire).filter(VenteCreditAlimentaire.created_at >= debut)
        if vendeur_id is not None:
            query = query.filter(VenteCreditAlimentaire.vendeur_id == vendeur_id)
        return {
            "nombre": query.count(),
            "montant": _montant_ventes(query),
        }

    def get_dashboard_rpv(self, db: Session) -> Dict[str, Any]:
        """Alertes de stock, ventes du jour et taille de l'équipe du point de vente."""
        produits = db.query(Produit).all()
        equipe = db.query(func.count(Gestionnaire.id)).filter(Gestionnaire.actif == True).scalar()  # noqa: E712

        return {
            "ventes_du_jour": self.ventes_du_jour(db),
            "produits_en_rupture": [p.id for p in produits if p.en_rupture],
            "produits_stock_faible": [p.id for p in produits if p.stock_faible],
            "equipe": equipe or 0,
        }


# Instance singleton du service
dashboard_service = DashboardService()
