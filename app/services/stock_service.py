"""
Service de gestion du stock : création de produits, réceptions et ajustements.
"""

import uuid
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.logging import log_stock_event
from app.core.responses import ApiError
from app.core.session import AuthSession, parse_user_id
from app.models.notification import PrioriteNotification
from app.models.produit import MouvementStock, Produit, TypeMouvement
from app.models.user import RoleGestionnaire
from app.services.notification_service import NotificationPayload, notification_service


class StockService:

    def statistiques(self, db: Session) -> Dict[str, Any]:
        """Nombre de produits, ruptures, stocks faibles et valeur totale du stock."""
        produits = db.query(Produit).all()
        return {
            "total_produits": len(produits),
            "en_rupture": sum(1 for p in produits if p.en_rupture),
            "stock_faible": sum(1 for p in produits if p.stock_faible),
            "valeur_totale": sum((Decimal(p.prix_unitaire) * p.stock for p in produits), Decimal("0")),
        }

    def creer_produit(
        self,
        db: Session,
        nom: str,
        prix_unitaire: Decimal,
        stock: int = 0,
        alerte_stock: int = 0,
        description: Optional[str] = None,
    ) -> Produit:
        """Crée un produit, avec un mouvement d'entrée initial si le stock est positif."""
        produit = Produit(
            nom=nom,
            description=description,
            prix_unitaire=prix_unitaire,
            stock=stock,
            alerte_stock=alerte_stock,
        )
        db.add(produit)
        db.flush()

        if produit.stock > 0:
            db.add(MouvementStock(
                produit_id=produit.id,
                type=TypeMouvement.ENTREE.value,
                quantite=produit.stock,
                motif="Stock initial",
                reference=f"INIT-{uuid.uuid4()}",
            ))
            log_stock_event("initial", produit.id, produit.stock, 0, produit.stock)

        return produit

    def ajuster(
        self,
        db: Session,
        session: AuthSession,
        produit_id: int,
        type_mouvement: str,
        quantite: int,
        motif: str,
    ) -> Dict[str, Any]:
        """
        Réception (ENTREE, quantité > 0) ou ajustement d'inventaire (AJUSTEMENT,
        quantité signée non nulle) par un magasinier.

        Raises:
            ApiError: 400 sur règle de quantité ou stock négatif, 404 si produit inconnu
        """
        if type_mouvement not in (TypeMouvement.ENTREE.value, TypeMouvement.AJUSTEMENT.value):
            raise ApiError("Type invalide (ENTREE ou AJUSTEMENT attendu)", 400)
        if type_mouvement == TypeMouvement.ENTREE.value and quantite <= 0:
            raise ApiError("La quantite doit etre superieure a 0 pour une entree", 400)
        if type_mouvement == TypeMouvement.AJUSTEMENT.value and quantite == 0:
            raise ApiError("La quantite d'ajustement ne peut pas etre 0", 400)

        produit = db.get(Produit, produit_id)
        if produit is None:
            raise ApiError("Produit introuvable", 404)

        stock_avant = produit.stock
        nouveau_stock = stock_avant + quantite
        if nouveau_stock < 0:
            raise ApiError("Le stock ne peut pas devenir negatif", 400)

        est_entree = type_mouvement == TypeMouvement.ENTREE.value
        mouvement = MouvementStock(
            produit_id=produit.id,
            type=type_mouvement,
            quantite=abs(quantite),
            motif=f"{motif} (par {session.display_name})",
            reference=f"MAG-{'REC' if est_entree else 'ADJ'}-{uuid.uuid4()}",
        )
        db.add(mouvement)
        produit.stock = nouveau_stock
        db.flush()

        notification_service.audit_log(
            db,
            parse_user_id(session),
            "RECEPTION_STOCK_MAGASINIER" if est_entree else "AJUSTEMENT_STOCK_MAGASINIER",
            "MouvementStock",
            mouvement.id,
        )

        libelle = "Réception" if est_entree else "Ajustement"
        notification_service.notify_roles(
            db,
            [
                RoleGestionnaire.RESPONSABLE_POINT_DE_VENTE.value,
                RoleGestionnaire.AGENT_LOGISTIQUE_APPROVISIONNEMENT.value,
            ],
            NotificationPayload(
                titre=f"{libelle} stock : {produit.nom}",
                message=(
                    f"{session.display_name} (magasinier) a enregistré {quantite:+d} unité(s) "
                    f"sur \"{produit.nom}\". Stock : {stock_avant} → {nouveau_stock}. Motif : {motif}."
                ),
                priorite=(
                    PrioriteNotification.NORMAL.value if est_entree else PrioriteNotification.HAUTE.value
                ),
                action_url=f"/dashboard/admin/stock/{produit.id}",
            ),
        )

        log_stock_event(type_mouvement.lower(), produit.id, quantite, stock_avant, nouveau_stock)
        return {"mouvement": mouvement, "produit": produit}


# Instance singleton du service
stock_service = StockService()
