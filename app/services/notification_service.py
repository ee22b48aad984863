"""
Service de gestion des notifications in-app et du journal d'audit.

Matrice de notification des mutations :
    Action                      | Admin | RPV | Caissier | Magazinier | Logistique | Comptable
    ----------------------------|-------|-----|----------|------------|------------|----------
    Vente enregistrée (caissier)|  x    |  x  |    -     |    x       |     -      |    x
    Nouveau / modif produit     |  x    |  -  |    -     |    x       |     x      |    -
    Ajustement magasinier       |  x    |  x  |    -     |    -       |     x      |    -
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.logging import logger
from app.models.notification import AuditLog, Notification, PrioriteNotification
from app.models.user import ADMIN_ROLES, Gestionnaire, User


@dataclass
class NotificationPayload:
    """Contenu d'une notification à diffuser."""
    titre: str
    message: str
    priorite: str = PrioriteNotification.NORMAL.value
    action_url: Optional[str] = None


class NotificationService:
    """
    Crée les notifications dans la transaction courante.
    Les appelants valident la transaction (db.commit()).
    """

    def get_admin_ids(self, db: Session) -> List[int]:
        """IDs des utilisateurs ADMIN et SUPER_ADMIN."""
        rows = db.query(User.id).filter(User.role.in_(ADMIN_ROLES)).all()
        return [row.id for row in rows]

    def get_gestionnaire_ids(self, db: Session, roles: Iterable[str]) -> List[int]:
        """IDs des gestionnaires actifs ayant un des rôles donnés."""
        roles = list(roles)
        if not roles:
            return []
        rows = db.query(Gestionnaire.member_id).filter(
            Gestionnaire.role.in_(roles),
            Gestionnaire.actif == True,  # noqa: E712
        ).all()
        return [row.member_id for row in rows]

    def notify(self, db: Session, user_ids: Iterable[int], payload: NotificationPayload) -> int:
        """
        Crée une notification par destinataire, doublons éliminés.

        Returns:
            Nombre de notifications créées
        """
        unique_ids = list(dict.fromkeys(user_ids))
        for user_id in unique_ids:
            db.add(Notification(
                user_id=user_id,
                titre=payload.titre,
                message=payload.message,
                priorite=payload.priorite,
                action_url=payload.action_url,
            ))
        if unique_ids:
            logger.debug(f"Notification '{payload.titre}' créée pour {len(unique_ids)} utilisateur(s)")
        return len(unique_ids)

    def notify_admins(self, db: Session, payload: NotificationPayload) -> int:
        """Notifie tous les ADMIN et SUPER_ADMIN."""
        return self.notify(db, self.get_admin_ids(db), payload)

    def notify_gestionnaires(self, db: Session, roles: Iterable[str], payload: NotificationPayload) -> int:
        """Notifie les gestionnaires actifs des rôles donnés."""
        return self.notify(db, self.get_gestionnaire_ids(db, roles), payload)

    def notify_roles(self, db: Session, gestionnaire_roles: Iterable[str], payload: NotificationPayload) -> int:
        """Notifie les administrateurs et les gestionnaires des rôles donnés en une opération."""
        ids = self.get_admin_ids(db) + self.get_gestionnaire_ids(db, gestionnaire_roles)
        return self.notify(db, ids, payload)

    def audit_log(
        self,
        db: Session,
        user_id: Optional[int],
        action: str,
        entite: str,
        entite_id: Optional[int] = None,
    ) -> AuditLog:
        """
        Trace une action métier.

        Args:
            user_id: Auteur de l'action (None pour le système)
            action: Code action (ex: VENTE_CAISSIER, AJUSTEMENT_STOCK_MAGASINIER)
            entite: Entité affectée
            entite_id: ID de l'entité affectée
        """
        entry = AuditLog(user_id=user_id, action=action, entite=entite, entite_id=entite_id)
        db.add(entry)
        logger.info(f"Audit: {action} sur {entite}#{entite_id} par {user_id or 'système'}")
        return entry


# Instance singleton du service
notification_service = NotificationService()
