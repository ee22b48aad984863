"""Migration initiale - Création des tables Nafa

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ROLE = ('SUPER_ADMIN', 'ADMIN', 'USER')
ROLE_GESTIONNAIRE = (
    'RESPONSABLE_POINT_DE_VENTE', 'RESPONSABLE_COMMUNAUTE', 'REVENDEUR',
    'AGENT_LOGISTIQUE_APPROVISIONNEMENT', 'MAGAZINIER', 'CAISSIER', 'COMMERCIAL',
    'COMPTABLE', 'AUDITEUR_INTERNE', 'RESPONSABLE_VENTE_CREDIT', 'CONTROLEUR_TERRAIN',
    'AGENT_TERRAIN', 'RESPONSABLE_ECONOMIQUE', 'RESPONSABLE_MARKETING', 'ACTIONNAIRE',
)
MEMBER_STATUS = ('ACTIF', 'INACTIF', 'SUSPENDU')

# Type déjà créé avec la table users : PostgreSQL ne doit pas le recréer
MEMBER_STATUS_EXISTANT = sa.Enum(*MEMBER_STATUS, name='memberstatus').with_variant(
    postgresql.ENUM(*MEMBER_STATUS, name='memberstatus', create_type=False), 'postgresql'
)

ENUM_NAMES = (
    'role', 'rolegestionnaire', 'memberstatus', 'typemouvement', 'sourcecreditalim',
    'statutcreditalim', 'periodecotisation', 'statutcotisation', 'frequencetontine',
    'statuttontine', 'statutcycle', 'statutcredit', 'prioritenotification',
)


def upgrade() -> None:
    # Table users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nom', sa.String(length=100), nullable=False),
        sa.Column('prenom', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('telephone', sa.String(length=20), nullable=True),
        sa.Column('adresse', sa.Text(), nullable=True),
        sa.Column('photo', sa.String(length=500), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum(*ROLE, name='role'), nullable=False),
        sa.Column('etat', sa.Enum(*MEMBER_STATUS, name='memberstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_telephone', 'users', ['telephone'], unique=True)
    op.create_index('idx_user_role', 'users', ['role'])
    op.create_index('idx_user_etat', 'users', ['etat'])

    # Table gestionnaires
    op.create_table(
        'gestionnaires',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('role', sa.Enum(*ROLE_GESTIONNAIRE, name='rolegestionnaire'), nullable=False),
        sa.Column('actif', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )
    op.create_index('ix_gestionnaires_id', 'gestionnaires', ['id'])
    op.create_index('idx_gestionnaire_role_actif', 'gestionnaires', ['role', 'actif'])

    # Table clients
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nom', sa.String(length=100), nullable=False),
        sa.Column('prenom', sa.String(length=100), nullable=False),
        sa.Column('telephone', sa.String(length=20), nullable=False),
        sa.Column('adresse', sa.Text(), nullable=True),
        sa.Column('etat', MEMBER_STATUS_EXISTANT, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_clients_id', 'clients', ['id'])
    op.create_index('ix_clients_telephone', 'clients', ['telephone'], unique=True)

    # Table produits
    op.create_table(
        'produits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nom', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('prix_unitaire', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('alerte_stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('prix_unitaire > 0', name='positive_prix'),
        sa.CheckConstraint('stock >= 0', name='non_negative_stock'),
    )
    op.create_index('ix_produits_id', 'produits', ['id'])
    op.create_index('ix_produits_nom', 'produits', ['nom'])

    # Table mouvements_stock
    op.create_table(
        'mouvements_stock',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('produit_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.Enum('ENTREE', 'SORTIE', 'AJUSTEMENT', name='typemouvement'), nullable=False),
        sa.Column('quantite', sa.Integer(), nullable=False),
        sa.Column('motif', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['produit_id'], ['produits.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reference'),
    )
    op.create_index('ix_mouvements_stock_id', 'mouvements_stock', ['id'])
    op.create_index('idx_mouvement_produit', 'mouvements_stock', ['produit_id', 'created_at'])

    # Table credits_alimentaires
    op.create_table(
        'credits_alimentaires',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=True),
        sa.Column('client_id', sa.Integer(), nullable=True),
        sa.Column('plafond', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('montant_utilise', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('montant_restant', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('source', sa.Enum('COTISATION', 'TONTINE', name='sourcecreditalim'), nullable=True),
        sa.Column('source_id', sa.Integer(), nullable=True),
        sa.Column('date_expiration', sa.DateTime(), nullable=True),
        sa.Column('statut', sa.Enum('ACTIF', 'EPUISE', 'EXPIRE', name='statutcreditalim'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('(member_id IS NULL) <> (client_id IS NULL)', name='credit_alim_has_owner'),
        sa.CheckConstraint('plafond > 0', name='positive_plafond'),
        sa.CheckConstraint('montant_restant >= 0', name='non_negative_restant'),
    )
    op.create_index('ix_credits_alimentaires_id', 'credits_alimentaires', ['id'])
    op.create_index('idx_credit_alim_member', 'credits_alimentaires', ['member_id'])
    op.create_index('idx_credit_alim_client', 'credits_alimentaires', ['client_id'])
    op.create_index('idx_credit_alim_statut', 'credits_alimentaires', ['statut'])

    # Table ventes_credit_alimentaire
    op.create_table(
        'ventes_credit_alimentaire',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('credit_alimentaire_id', sa.Integer(), nullable=False),
        sa.Column('produit_id', sa.Integer(), nullable=False),
        sa.Column('quantite', sa.Integer(), nullable=False),
        sa.Column('prix_unitaire', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('vendeur_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['credit_alimentaire_id'], ['credits_alimentaires.id']),
        sa.ForeignKeyConstraint(['produit_id'], ['produits.id']),
        sa.ForeignKeyConstraint(['vendeur_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantite > 0', name='positive_quantite'),
    )
    op.create_index('ix_ventes_credit_alimentaire_id', 'ventes_credit_alimentaire', ['id'])
    op.create_index('idx_vente_credit', 'ventes_credit_alimentaire', ['credit_alimentaire_id'])
    op.create_index('idx_vente_created', 'ventes_credit_alimentaire', ['created_at'])

    # Table cotisations
    op.create_table(
        'cotisations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=True),
        sa.Column('client_id', sa.Integer(), nullable=True),
        sa.Column('montant', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('periode', sa.Enum('MENSUEL', 'ANNUEL', name='periodecotisation'), nullable=False),
        sa.Column(
            'statut',
            sa.Enum('EN_ATTENTE', 'PAYEE', 'EXPIREE', 'ANNULEE', name='statutcotisation'),
            nullable=False,
        ),
        sa.Column('date_paiement', sa.DateTime(), nullable=True),
        sa.Column('date_expiration', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('montant > 0', name='positive_montant_cotisation'),
    )
    op.create_index('ix_cotisations_id', 'cotisations', ['id'])
    op.create_index('idx_cotisation_member', 'cotisations', ['member_id'])
    op.create_index('idx_cotisation_statut_expiration', 'cotisations', ['statut', 'date_expiration'])

    # Table tontines
    op.create_table(
        'tontines',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nom', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('montant_cycle', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'frequence',
            sa.Enum('HEBDOMADAIRE', 'MENSUEL', 'ANNUEL', name='frequencetontine'),
            nullable=False,
        ),
        sa.Column(
            'statut',
            sa.Enum('BROUILLON', 'ACTIVE', 'TERMINEE', 'SUSPENDUE', name='statuttontine'),
            nullable=False,
        ),
        sa.Column('date_debut', sa.DateTime(), nullable=True),
        sa.Column('date_fin', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('montant_cycle > 0', name='positive_montant_cycle'),
    )
    op.create_index('ix_tontines_id', 'tontines', ['id'])
    op.create_index('ix_tontines_nom', 'tontines', ['nom'])
    op.create_index('idx_tontine_statut', 'tontines', ['statut'])

    # Table tontine_membres
    op.create_table(
        'tontine_membres',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tontine_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('ordre', sa.Integer(), nullable=True),
        sa.Column('joined_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('date_sortie', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['tontine_id'], ['tontines.id']),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tontine_id', 'member_id', name='unique_tontine_membre'),
    )
    op.create_index('ix_tontine_membres_id', 'tontine_membres', ['id'])
    op.create_index('idx_tontine_membre_member', 'tontine_membres', ['member_id'])

    # Table tontine_cycles
    op.create_table(
        'tontine_cycles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tontine_id', sa.Integer(), nullable=False),
        sa.Column('numero', sa.Integer(), nullable=False),
        sa.Column('beneficiaire_id', sa.Integer(), nullable=True),
        sa.Column('montant_pot', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('statut', sa.Enum('EN_COURS', 'COMPLETE', name='statutcycle'), nullable=False),
        sa.Column('date_cloture', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['tontine_id'], ['tontines.id']),
        sa.ForeignKeyConstraint(['beneficiaire_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tontine_id', 'numero', name='unique_cycle_numero'),
    )
    op.create_index('ix_tontine_cycles_id', 'tontine_cycles', ['id'])

    # Table credits
    op.create_table(
        'credits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('montant', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'statut',
            sa.Enum(
                'EN_ATTENTE', 'APPROUVE', 'REJETE', 'REMBOURSE_PARTIEL', 'REMBOURSE_TOTAL',
                name='statutcredit',
            ),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('montant > 0', name='positive_montant_credit'),
    )
    op.create_index('ix_credits_id', 'credits', ['id'])
    op.create_index('idx_credit_statut', 'credits', ['statut'])

    # Table wallets
    op.create_table(
        'wallets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('solde_general', sa.Numeric(precision=14, scale=2), server_default='0', nullable=False),
        sa.Column('solde_tontine', sa.Numeric(precision=14, scale=2), server_default='0', nullable=False),
        sa.Column('solde_credit', sa.Numeric(precision=14, scale=2), server_default='0', nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )
    op.create_index('ix_wallets_id', 'wallets', ['id'])

    # Table wallet_transactions
    op.create_table(
        'wallet_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('wallet_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('montant', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reference'),
    )
    op.create_index('ix_wallet_transactions_id', 'wallet_transactions', ['id'])

    # Table notifications
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('uuid', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('titre', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column(
            'priorite',
            sa.Enum('BASSE', 'NORMAL', 'HAUTE', name='prioritenotification'),
            nullable=False,
        ),
        sa.Column('action_url', sa.String(length=500), nullable=True),
        sa.Column('lue', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('date_lecture', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_uuid', 'notifications', ['uuid'], unique=True)
    op.create_index('idx_notification_user_lue', 'notifications', ['user_id', 'lue'])
    op.create_index('idx_notification_created', 'notifications', ['created_at'])

    # Table audit_logs
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entite', sa.String(length=100), nullable=False),
        sa.Column('entite_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('idx_audit_entite', 'audit_logs', ['entite', 'entite_id'])


def downgrade() -> None:
    # Supprimer les tables dans l'ordre inverse des dépendances
    op.drop_table('audit_logs')
    op.drop_table('notifications')
    op.drop_table('wallet_transactions')
    op.drop_table('wallets')
    op.drop_table('credits')
    op.drop_table('tontine_cycles')
    op.drop_table('tontine_membres')
    op.drop_table('tontines')
    op.drop_table('cotisations')
    op.drop_table('ventes_credit_alimentaire')
    op.drop_table('credits_alimentaires')
    op.drop_table('mouvements_stock')
    op.drop_table('produits')
    op.drop_table('clients')
    op.drop_table('gestionnaires')
    op.drop_table('users')

    # Supprimer les types ENUM (PostgreSQL)
    if op.get_bind().dialect.name == 'postgresql':
        for name in ENUM_NAMES:
            op.execute(f"DROP TYPE IF EXISTS {name}")
