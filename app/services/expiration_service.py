"""
Traitement quotidien des expirations.
Appelé par /api/cron/expirations, ou directement par le planificateur système :

    python -m app.services.expiration_service
"""

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.database import get_db_context
from app.core.logging import logger
from app.models.cotisation import Cotisation, StatutCotisation
from app.models.credit_alimentaire import CreditAlimentaire, StatutCreditAlim
from app.services.notification_service import NotificationPayload, notification_service


class ExpirationService:
    """
    Expire automatiquement :
    - les cotisations EN_ATTENTE dont la date d'expiration est dépassée (-> EXPIREE)
    - les crédits alimentaires ACTIF dont la date d'expiration est dépassée (-> EXPIRE)
    """

    def traiter_expirations(self, db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or datetime.utcnow()

        cotisations = db.query(Cotisation).filter(
            Cotisation.statut == StatutCotisation.EN_ATTENTE.value,
            Cotisation.date_expiration.isnot(None),
            Cotisation.date_expiration < now,
        ).all()
        for cotisation in cotisations:
            cotisation.statut = StatutCotisation.EXPIREE.value

        credits = db.query(CreditAlimentaire).filter(
            CreditAlimentaire.statut == StatutCreditAlim.ACTIF.value,
            CreditAlimentaire.date_expiration.isnot(None),
            CreditAlimentaire.date_expiration < now,
        ).all()
        for credit in credits:
            credit.statut = StatutCreditAlim.EXPIRE.value

        total = len(cotisations) + len(credits)
        if total > 0:
            lignes = []
            if cotisations:
                lignes.append(f"{len(cotisations)} cotisation(s) expiree(s)")
            if credits:
                lignes.append(f"{len(credits)} credit(s) alimentaire(s) expire(s)")

            notification_service.notify_admins(db, NotificationPayload(
                titre="Expirations automatiques",
                message=f"Traitement quotidien : {', '.join(lignes)}.",
                action_url="/dashboard/admin",
            ))
            notification_service.audit_log(db, None, "EXPIRATION_AUTOMATIQUE", "Systeme")

        db.flush()
        logger.info(
            f"Expirations traitées: {len(cotisations)} cotisation(s), {len(credits)} crédit(s) alimentaire(s)"
        )

        return {
            "cotisations_expirees": len(cotisations),
            "credits_expires": len(credits),
        }

    def executer(self) -> Dict[str, int]:
        """Traite les expirations dans une transaction dédiée, validée en fin de traitement."""
        with get_db_context() as db:
            return self.traiter_expirations(db)


# Instance singleton du service
expiration_service = ExpirationService()


if __name__ == "__main__":
    expiration_service.executer()
