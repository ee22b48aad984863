"""Gardes de rôle des espaces de gestionnaire."""

import pytest

from app.core.guards import (
    AGENT_TERRAIN,
    CAISSIER,
    COMPTABLE,
    LOGISTIQUE,
    MAGASINIER,
    RPV,
    GuardPolicy,
    authorize,
    get_agent_terrain_session,
    get_caissier_session,
    get_comptable_session,
    get_logistique_session,
    get_magasinier_session,
    get_rpv_session,
    is_admin,
)
from app.core.session import AuthSession


def session(role="USER", gestionnaire_role=None, user_id="7"):
    return AuthSession(user_id=user_id, role=role, gestionnaire_role=gestionnaire_role)


GUARDS = [
    (get_agent_terrain_session, "AGENT_TERRAIN", False),
    (get_caissier_session, "CAISSIER", True),
    (get_comptable_session, "COMPTABLE", True),
    (get_logistique_session, "AGENT_LOGISTIQUE_APPROVISIONNEMENT", False),
    (get_magasinier_session, "MAGAZINIER", False),
    (get_rpv_session, "RESPONSABLE_POINT_DE_VENTE", True),
]


@pytest.mark.parametrize("guard, capability, admin_bypass", GUARDS)
def test_guard_returns_session_for_matching_capability(guard, capability, admin_bypass):
    s = session(gestionnaire_role=capability)
    assert guard(s) is s


@pytest.mark.parametrize("guard, capability, admin_bypass", GUARDS)
def test_guard_rejects_absent_session(guard, capability, admin_bypass):
    assert guard(None) is None


@pytest.mark.parametrize("guard, capability, admin_bypass", GUARDS)
def test_guard_rejects_other_capability(guard, capability, admin_bypass):
    assert guard(session(gestionnaire_role="REVENDEUR")) is None
    assert guard(session(gestionnaire_role=None)) is None


@pytest.mark.parametrize("guard, capability, admin_bypass", GUARDS)
@pytest.mark.parametrize("admin_role", ["ADMIN", "SUPER_ADMIN"])
def test_guard_admin_bypass(guard, capability, admin_bypass, admin_role):
    s = session(role=admin_role)
    if admin_bypass:
        assert guard(s) is s
    else:
        assert guard(s) is None


def test_capability_match_is_exact():
    assert get_caissier_session(session(gestionnaire_role="caissier")) is None
    assert get_caissier_session(session(gestionnaire_role="CAISSIER ")) is None
    assert get_magasinier_session(session(gestionnaire_role="MAGASINIER")) is None


def test_policies():
    assert AGENT_TERRAIN.allow_admin is False
    assert LOGISTIQUE.allow_admin is False
    assert MAGASINIER.allow_admin is False
    assert CAISSIER.allow_admin and COMPTABLE.allow_admin and RPV.allow_admin
    assert MAGASINIER.required_capability == "MAGAZINIER"


def test_admin_with_matching_capability_on_operational_space():
    s = session(role="ADMIN", gestionnaire_role="MAGAZINIER")
    assert get_magasinier_session(s) is s


def test_authorize_custom_policy():
    policy = GuardPolicy("COMMERCIAL", allow_admin=False)
    s = session(gestionnaire_role="COMMERCIAL")
    assert authorize(s, policy) is s
    assert authorize(session(role="SUPER_ADMIN"), policy) is None


def test_is_admin():
    assert is_admin(session(role="ADMIN"))
    assert is_admin(session(role="SUPER_ADMIN"))
    assert not is_admin(session(role="USER"))
    assert not is_admin(None)
