"""
Routes de l'espace membre - Crédits alimentaires, cotisations, tontines,
portefeuille et tableau de bord.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.logging import logger
from app.core.responses import ApiError, api_success
from app.models.cotisation import Cotisation, StatutCotisation
from app.models.credit_alimentaire import CreditAlimentaire
from app.models.finance import Wallet, WalletTransaction
from app.models.tontine import StatutTontine, Tontine, TontineMembre
from app.schemas.cotisation import CotisationResponse
from app.schemas.credit_alimentaire import (
    Consommation,
    CreditAlimentaireCreate,
    CreditAlimentaireResponse,
    VenteResponse,
)
from app.schemas.tontine import TontineMembreResponse, TontineResponse
from app.schemas.finance import WalletTransactionResponse
from app.services.credit_alimentaire_service import credit_alimentaire_service
from app.services.dashboard_service import dashboard_service
from app.services.notification_service import NotificationPayload, notification_service
from app.api.deps import get_current_user_id


router = APIRouter()


@router.get(
    "/creditsAlimentaires",
    summary="Mes crédits alimentaires",
)
async def list_credits_alimentaires(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """
    Liste les crédits alimentaires du membre connecté, ventes incluses.
    """
    credits = db.query(CreditAlimentaire).filter(
        CreditAlimentaire.member_id == user_id
    ).order_by(CreditAlimentaire.created_at.desc()).all()

    return api_success([CreditAlimentaireResponse.model_validate(c) for c in credits])


@router.post(
    "/creditsAlimentaires",
    status_code=status.HTTP_201_CREATED,
    summary="Créer un crédit alimentaire",
)
async def create_credit_alimentaire(
    data: CreditAlimentaireCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    credit = credit_alimentaire_service.creer_credit(
        db,
        plafond=data.plafond,
        member_id=user_id,
        source=data.source.value if data.source else None,
        source_id=data.source_id,
        date_expiration=data.date_expiration,
    )
    notification_service.notify(db, [user_id], NotificationPayload(
        titre="Crédit alimentaire créé",
        message=f"Un crédit alimentaire de {data.plafond} FCFA vous a été attribué.",
        action_url="/dashboard/user/creditsAlimentaires",
    ))
    db.commit()
    db.refresh(credit)

    logger.info(f"Crédit alimentaire {credit.id} créé pour le membre {user_id}")
    return api_success(CreditAlimentaireResponse.model_validate(credit), status=status.HTTP_201_CREATED)


@router.post(
    "/creditsAlimentaires/{credit_id}/consume",
    summary="Acheter avec un crédit alimentaire",
)
async def consume_credit_alimentaire(
    credit_id: int,
    data: Consommation,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """
    Achète un produit avec un crédit alimentaire du membre.

    Le crédit passe à EPUISE quand son montant restant atteint 0.
    """
    credit = db.get(CreditAlimentaire, credit_id)
    if credit is None or credit.member_id != user_id:
        raise ApiError("Not allowed", 403)

    vente = credit_alimentaire_service.consommer(
        db, credit, data.produit_id, data.quantite, vendeur_id=user_id
    )
    notification_service.notify(db, [user_id], NotificationPayload(
        titre="Achat effectué",
        message=(
            f"Vous avez acheté {data.quantite} x {vente.produit.nom} pour {vente.montant} FCFA. "
            f"Reste : {credit.montant_restant} FCFA."
        ),
        action_url="/dashboard/user/creditsAlimentaires",
    ))
    db.commit()
    db.refresh(vente)

    return api_success(VenteResponse.model_validate(vente))


@router.get(
    "/cotisations",
    summary="Mes cotisations",
)
async def list_cotisations(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    cotisations = db.query(Cotisation).filter(
        Cotisation.member_id == user_id
    ).order_by(Cotisation.created_at.desc()).all()

    return api_success([CotisationResponse.model_validate(c) for c in cotisations])


@router.post(
    "/cotisations/{cotisation_id}/pay",
    summary="Payer une cotisation depuis le portefeuille",
)
async def pay_cotisation(
    cotisation_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """
    Débite le solde général du portefeuille, marque la cotisation PAYEE
    et génère le crédit alimentaire correspondant.
    """
    cotisation = db.get(Cotisation, cotisation_id)
    if cotisation is None or cotisation.member_id != user_id:
        raise ApiError("Not allowed", 403)
    if cotisation.statut != StatutCotisation.EN_ATTENTE.value:
        raise ApiError("Cette cotisation n'est pas en attente de paiement", 400)

    wallet = db.query(Wallet).filter(Wallet.member_id == user_id).first()
    if wallet is None or Decimal(wallet.solde_general) < Decimal(cotisation.montant):
        raise ApiError("Solde insuffisant", 400)

    wallet.solde_general = Decimal(wallet.solde_general) - Decimal(cotisation.montant)
    db.add(WalletTransaction(
        wallet_id=wallet.id,
        type="COTISATION",
        montant=cotisation.montant,
        description=f"Paiement cotisation #{cotisation.id}",
        reference=f"COTISATION-{cotisation.id}-{uuid.uuid4()}",
    ))
    cotisation.statut = StatutCotisation.PAYEE.value
    cotisation.date_paiement = datetime.utcnow()

    notification_service.notify(db, [user_id], NotificationPayload(
        titre="Cotisation payée",
        message=f"Votre cotisation de {cotisation.montant} a été réglée avec succès",
    ))
    credit_alimentaire_service.generer_depuis_cotisation(db, cotisation)
    db.commit()

    logger.info(f"Cotisation {cotisation.id} payée par le membre {user_id}")
    return api_success({"message": "Cotisation payée avec succès"})


@router.get(
    "/tontines",
    summary="Tontines ouvertes et participations",
)
async def list_tontines(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """
    Tontines ACTIVE, chacune marquée selon la participation en cours du membre.
    """
    tontines = db.query(Tontine).filter(
        Tontine.statut == StatutTontine.ACTIVE.value
    ).order_by(Tontine.created_at.desc()).all()

    data = []
    for tontine in tontines:
        item = TontineResponse.model_validate(tontine).model_dump()
        item["participe"] = any(m.member_id == user_id for m in tontine.membres_actifs)
        data.append(item)
    return api_success(data)


@router.post(
    "/tontines/{tontine_id}/join",
    status_code=status.HTTP_201_CREATED,
    summary="Rejoindre une tontine",
)
async def join_tontine(
    tontine_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """
    Inscrit le membre à une tontine ACTIVE, en dernière position de passage.
    Un membre sorti reprend sa participation.
    """
    tontine = db.get(Tontine, tontine_id)
    if tontine is None:
        raise ApiError("Tontine introuvable", 404)
    if tontine.statut != StatutTontine.ACTIVE.value:
        raise ApiError("La tontine n'est pas active", 400)

    participation = db.query(TontineMembre).filter(
        TontineMembre.tontine_id == tontine_id,
        TontineMembre.member_id == user_id,
    ).first()
    if participation is not None and participation.date_sortie is None:
        raise ApiError("Déjà membre", 400)

    dernier = db.query(func.max(TontineMembre.ordre)).filter(
        TontineMembre.tontine_id == tontine_id,
        TontineMembre.date_sortie.is_(None),
    ).scalar() or 0

    if participation is None:
        participation = TontineMembre(tontine_id=tontine_id, member_id=user_id)
        db.add(participation)
    participation.date_sortie = None
    participation.ordre = dernier + 1

    notification_service.notify(db, [user_id], NotificationPayload(
        titre="Tontine rejointe",
        message=f'Vous avez rejoint la tontine "{tontine.nom}".',
        action_url=f"/dashboard/user/tontines/{tontine_id}",
    ))
    db.commit()
    db.refresh(participation)

    logger.info(f"Membre {user_id} inscrit à la tontine {tontine_id}")
    return api_success(TontineMembreResponse.model_validate(participation), status=status.HTTP_201_CREATED)


@router.post(
    "/tontines/{tontine_id}/leave",
    summary="Quitter une tontine",
)
async def leave_tontine(
    tontine_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    participation = db.query(TontineMembre).filter(
        TontineMembre.tontine_id == tontine_id,
        TontineMembre.member_id == user_id,
        TontineMembre.date_sortie.is_(None),
    ).first()
    if participation is None:
        raise ApiError("Vous ne participez pas à cette tontine", 404)

    participation.date_sortie = datetime.utcnow()
    notification_service.notify(db, [user_id], NotificationPayload(
        titre="Tontine quittée",
        message=f"Vous avez quitté la tontine #{tontine_id}.",
    ))
    db.commit()

    logger.info(f"Membre {user_id} sorti de la tontine {tontine_id}")
    return api_success({"message": "Tontine quittée"})


@router.get(
    "/transactions",
    summary="Mouvements de mon portefeuille",
)
async def list_transactions(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    transactions = db.query(WalletTransaction).join(Wallet).filter(
        Wallet.member_id == user_id
    ).order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc()).all()

    return api_success([WalletTransactionResponse.model_validate(t) for t in transactions])


@router.get(
    "/dashboard",
    summary="Tableau de bord du membre",
)
async def get_dashboard(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    return api_success(dashboard_service.get_dashboard_user(db, user_id))
