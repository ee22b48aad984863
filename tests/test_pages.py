"""Redirections d'accueil, règles d'accès des tableaux de bord et pages de détail."""

import asyncio

import pytest

from app.core.session import AuthSession
from app.web.pages import (
    ADMIN_PAGE_SHELLS,
    dashboard_redirect,
    resolve_params,
    root_redirect_target,
)


def session(role="USER", gestionnaire_role=None):
    return AuthSession(user_id="1", role=role, gestionnaire_role=gestionnaire_role)


@pytest.mark.parametrize(
    "s, expected",
    [
        (None, "/auth/login"),
        (session("SUPER_ADMIN"), "/dashboard/admin"),
        (session("ADMIN"), "/dashboard/admin"),
        (session("USER"), "/dashboard/user"),
        (session("USER", "CAISSIER"), "/dashboard/user"),
        (session("INVITE"), "/unauthorized"),
        (session(None), "/unauthorized"),
    ],
)
def test_root_redirect_target(s, expected):
    assert root_redirect_target(s) == expected


def test_root_redirects_without_session(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


@pytest.mark.parametrize(
    "role, expected",
    [
        ("SUPER_ADMIN", "/dashboard/admin"),
        ("ADMIN", "/dashboard/admin"),
        ("USER", "/dashboard/user"),
        ("COMPTE_INCONNU", "/unauthorized"),
    ],
)
def test_root_redirects_by_role(client, raw_auth_headers, role, expected):
    response = client.get("/", headers=raw_auth_headers("1", role=role), follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == expected


def test_dashboard_redirect_rules():
    assert dashboard_redirect(None, "/dashboard/admin") == "/auth/login"
    assert dashboard_redirect(session("ADMIN"), "/dashboard/admin/clients") is None
    assert dashboard_redirect(session("ADMIN"), "/dashboard/user") == "/dashboard/admin"
    assert dashboard_redirect(session("USER"), "/dashboard/admin") == "/dashboard/user"
    assert dashboard_redirect(
        session("USER", "CAISSIER"), "/dashboard/admin"
    ) == "/dashboard/user/caissiers"
    assert dashboard_redirect(
        session("USER", "MAGAZINIER"), "/dashboard/user"
    ) == "/dashboard/user/magasiniers"
    assert dashboard_redirect(session("USER"), "/dashboard/user") is None
    assert dashboard_redirect(session("USER", "CAISSIER"), "/dashboard/user/caissiers") is None
    assert dashboard_redirect(session("INVITE"), "/dashboard/admin") == "/unauthorized"
    assert dashboard_redirect(session("INVITE"), "/dashboard/user") == "/unauthorized"


def test_resolve_params_accepts_mapping_and_awaitable():
    async def params():
        return {"id": "42"}

    assert asyncio.run(resolve_params({"id": "7"})) == {"id": "7"}
    assert asyncio.run(resolve_params(params())) == {"id": "42"}


def test_every_section_has_detail_and_edit_shells():
    for section, (detail, edit) in ADMIN_PAGE_SHELLS.items():
        assert detail.prop == edit.prop
        assert detail.component != edit.component


def test_admin_detail_page_renders_component_with_id(client, raw_auth_headers):
    response = client.get("/dashboard/admin/clients/42", headers=raw_auth_headers("1", role="ADMIN"))

    assert response.status_code == 200
    assert response.template.name == "components/ClientDetails.html"
    assert response.context["component"] == "ClientDetails"
    assert response.context["props"] == {"clientId": "42"}
    assert 'data-component="ClientDetails"' in response.text


@pytest.mark.parametrize(
    "path, component, props",
    [
        ("/dashboard/admin/membres/5/edit", "EditMember", {"memberId": "5"}),
        ("/dashboard/admin/gestionnaires/3", "GestionnaireDetails", {"gestionnaireId": "3"}),
        ("/dashboard/admin/stock/9/edit", "StockEdit", {"produitId": "9"}),
        ("/dashboard/admin/creditsAlimentaires/11", "CreditAlimentaireDetails", {"creditId": "11"}),
    ],
)
def test_admin_shell_pages(client, raw_auth_headers, path, component, props):
    response = client.get(path, headers=raw_auth_headers("1", role="SUPER_ADMIN"))

    assert response.status_code == 200
    assert response.context["component"] == component
    assert response.context["props"] == props


def test_admin_shell_id_is_passed_through_unvalidated(client, raw_auth_headers):
    response = client.get("/dashboard/admin/tontines/abc", headers=raw_auth_headers("1", role="ADMIN"))
    assert response.status_code == 200
    assert response.context["props"] == {"tontineId": "abc"}


def test_admin_page_redirects_member_to_own_dashboard(client, raw_auth_headers):
    response = client.get(
        "/dashboard/admin/clients/42",
        headers=raw_auth_headers("1", role="USER", gestionnaire_role="COMPTABLE"),
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard/user/comptables"


def test_admin_page_requires_session(client):
    response = client.get("/dashboard/admin/clients/42", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


def test_unknown_admin_section(client, raw_auth_headers):
    response = client.get("/dashboard/admin/inconnu/1", headers=raw_auth_headers("1", role="ADMIN"))
    assert response.status_code == 404
    assert response.json() == {"error": "Page introuvable"}
