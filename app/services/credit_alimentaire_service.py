"""
Service des crédits alimentaires.
Génération automatique depuis les cotisations et les tontines, consommation en produits.
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.logging import logger, log_stock_event
from app.core.responses import ApiError
from app.models.client import Client
from app.models.cotisation import Cotisation
from app.models.credit_alimentaire import (
    CreditAlimentaire,
    SourceCreditAlim,
    StatutCreditAlim,
    VenteCreditAlimentaire,
)
from app.models.produit import MouvementStock, Produit, TypeMouvement
from app.models.tontine import TontineCycle
from app.models.user import User
from app.services.notification_service import NotificationPayload, notification_service


class CreditAlimentaireService:
    """
    Règles de gestion des crédits alimentaires.
    Les méthodes travaillent dans la transaction de l'appelant.
    """

    def _date_expiration(self) -> datetime:
        return datetime.utcnow() + timedelta(days=settings.CREDIT_ALIMENTAIRE_DUREE_JOURS)

    def _credit_actif_existant(
        self,
        db: Session,
        source: SourceCreditAlim,
        source_id: int,
        member_id: Optional[int] = None,
        client_id: Optional[int] = None,
    ) -> Optional[CreditAlimentaire]:
        query = db.query(CreditAlimentaire).filter(
            CreditAlimentaire.source == source.value,
            CreditAlimentaire.source_id == source_id,
            CreditAlimentaire.statut == StatutCreditAlim.ACTIF.value,
        )
        if client_id is not None:
            query = query.filter(CreditAlimentaire.client_id == client_id)
        else:
            query = query.filter(CreditAlimentaire.member_id == member_id)
        return query.first()

    def _nom_beneficiaire(self, db: Session, member_id: Optional[int], client_id: Optional[int]) -> str:
        if client_id is not None:
            client = db.get(Client, client_id)
            return client.full_name if client else "Client"
        member = db.get(User, member_id) if member_id is not None else None
        return member.full_name.strip() if member else "Bénéficiaire"

    def creer_credit(
        self,
        db: Session,
        plafond: Decimal,
        member_id: Optional[int] = None,
        client_id: Optional[int] = None,
        source: Optional[str] = None,
        source_id: Optional[int] = None,
        date_expiration: Optional[datetime] = None,
    ) -> CreditAlimentaire:
        """Crée un crédit ACTIF dont le montant restant est le plafond."""
        if member_id is None and client_id is None:
            raise ApiError("Un crédit alimentaire doit avoir un propriétaire", 400)
        if member_id is not None and client_id is not None:
            raise ApiError("Un crédit alimentaire appartient à un membre ou à un client, pas aux deux", 400)

        credit = CreditAlimentaire(
            member_id=member_id,
            client_id=client_id,
            plafond=plafond,
            montant_utilise=Decimal("0"),
            montant_restant=plafond,
            source=source,
            source_id=source_id,
            date_expiration=date_expiration,
            statut=StatutCreditAlim.ACTIF.value,
        )
        db.add(credit)
        db.flush()
        return credit

    def generer_depuis_cotisation(self, db: Session, cotisation: Cotisation) -> Optional[CreditAlimentaire]:
        """
        Génère un crédit alimentaire quand une cotisation passe à PAYEE.

        Plafond = montant de la cotisation, expiration à 30 jours. Rien n'est
        créé si la cotisation n'a pas de titulaire ou si un crédit actif
        existe déjà pour cette cotisation.
        """
        if cotisation.client_id is None and cotisation.member_id is None:
            return None

        if self._credit_actif_existant(
            db,
            SourceCreditAlim.COTISATION,
            cotisation.id,
            member_id=cotisation.member_id,
            client_id=cotisation.client_id,
        ):
            return None

        credit = self.creer_credit(
            db,
            plafond=cotisation.montant,
            member_id=cotisation.member_id if cotisation.client_id is None else None,
            client_id=cotisation.client_id,
            source=SourceCreditAlim.COTISATION.value,
            source_id=cotisation.id,
            date_expiration=self._date_expiration(),
        )

        nom = self._nom_beneficiaire(db, cotisation.member_id, cotisation.client_id)
        notification_service.notify_admins(db, NotificationPayload(
            titre="Credit alimentaire auto-genere",
            message=(
                f"Un credit alimentaire de {cotisation.montant} FCFA a ete genere pour {nom} "
                f"suite au paiement de la cotisation #{cotisation.id}."
            ),
            action_url=f"/dashboard/admin/creditsAlimentaires/{credit.id}",
        ))
        logger.info(f"Crédit alimentaire {credit.id} généré depuis la cotisation {cotisation.id}")
        return credit

    def generer_depuis_tontine(self, db: Session, cycle: TontineCycle) -> Optional[CreditAlimentaire]:
        """
        Génère un crédit alimentaire pour le bénéficiaire d'un cycle de tontine complété.
        Plafond = montant du pot.
        """
        if cycle.beneficiaire_id is None:
            return None

        if self._credit_actif_existant(db, SourceCreditAlim.TONTINE, cycle.id, member_id=cycle.beneficiaire_id):
            return None

        credit = self.creer_credit(
            db,
            plafond=cycle.montant_pot,
            member_id=cycle.beneficiaire_id,
            source=SourceCreditAlim.TONTINE.value,
            source_id=cycle.id,
            date_expiration=self._date_expiration(),
        )

        nom = self._nom_beneficiaire(db, cycle.beneficiaire_id, None)
        notification_service.notify_admins(db, NotificationPayload(
            titre="Credit alimentaire auto-genere (Tontine)",
            message=(
                f"Un credit alimentaire de {cycle.montant_pot} FCFA a ete genere pour {nom} "
                f"suite a la reception du pot tontine (cycle #{cycle.id})."
            ),
            action_url=f"/dashboard/admin/creditsAlimentaires/{credit.id}",
        ))
        logger.info(f"Crédit alimentaire {credit.id} généré depuis le cycle de tontine {cycle.id}")
        return credit

    def consommer(
        self,
        db: Session,
        credit: CreditAlimentaire,
        produit_id: int,
        quantite: int,
        vendeur_id: Optional[int] = None,
    ) -> VenteCreditAlimentaire:
        """
        Achète des produits avec un crédit alimentaire.

        Raises:
            ApiError: 400 si le crédit n'est pas actif, le stock ou le crédit insuffisant;
                      404 si le produit n'existe pas
        """
        if quantite <= 0:
            raise ApiError("La quantite doit etre superieure a 0", 400)
        if credit.statut != StatutCreditAlim.ACTIF.value:
            raise ApiError("Crédit alimentaire inactif", 400)

        produit = db.get(Produit, produit_id)
        if produit is None:
            raise ApiError("Produit introuvable", 404)
        if produit.stock < quantite:
            raise ApiError("Stock insuffisant", 400)

        total = Decimal(produit.prix_unitaire) * quantite
        if total > Decimal(credit.montant_restant):
            raise ApiError("Crédit insuffisant", 400)

        vente = VenteCreditAlimentaire(
            credit_alimentaire_id=credit.id,
            produit_id=produit.id,
            quantite=quantite,
            prix_unitaire=produit.prix_unitaire,
            vendeur_id=vendeur_id,
        )
        db.add(vente)

        credit.montant_utilise = Decimal(credit.montant_utilise) + total
        credit.montant_restant = Decimal(credit.montant_restant) - total
        if credit.montant_restant == 0:
            credit.statut = StatutCreditAlim.EPUISE.value

        stock_avant = produit.stock
        produit.stock = stock_avant - quantite
        db.add(MouvementStock(
            produit_id=produit.id,
            type=TypeMouvement.SORTIE.value,
            quantite=quantite,
            motif=f"Vente credit alimentaire #{credit.id}",
            reference=f"VENTE-{credit.id}-{uuid.uuid4()}",
        ))
        db.flush()

        log_stock_event("vente", produit.id, -quantite, stock_avant, produit.stock)
        return vente


# Instance singleton du service
credit_alimentaire_service = CreditAlimentaireService()
