"""
Pages de l'application - Redirections d'accueil, règles d'accès aux tableaux
de bord et pages de détail / modification de l'administration.
"""

import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Mapping, Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.core.logging import log_access_denied
from app.core.responses import ApiError
from app.core.session import AuthSession
from app.models.user import ADMIN_ROLES, Role, RoleGestionnaire
from app.api.deps import get_auth_session


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals["app_name"] = settings.APP_NAME

router = APIRouter()

LOGIN_URL = "/auth/login"
UNAUTHORIZED_URL = "/unauthorized"
ADMIN_DASHBOARD_URL = "/dashboard/admin"
USER_DASHBOARD_URL = "/dashboard/user"

# Tableau de bord de chaque rôle de gestionnaire
GESTIONNAIRE_DASHBOARDS = {
    RoleGestionnaire.RESPONSABLE_POINT_DE_VENTE.value: "/dashboard/user/responsablesPointDeVente",
    RoleGestionnaire.RESPONSABLE_COMMUNAUTE.value: "/dashboard/user/responsablesCommunaute",
    RoleGestionnaire.REVENDEUR.value: "/dashboard/user/revendeurs",
    RoleGestionnaire.AGENT_LOGISTIQUE_APPROVISIONNEMENT.value: "/dashboard/user/logistiquesApprovisionnements",
    RoleGestionnaire.MAGAZINIER.value: "/dashboard/user/magasiniers",
    RoleGestionnaire.CAISSIER.value: "/dashboard/user/caissiers",
    RoleGestionnaire.COMPTABLE.value: "/dashboard/user/comptables",
    RoleGestionnaire.AGENT_TERRAIN.value: "/dashboard/user/agentsTerrain",
}

ESPACES_GESTIONNAIRE = {
    url.rsplit("/", 1)[-1]: role for role, url in GESTIONNAIRE_DASHBOARDS.items()
}


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def root_redirect_target(session: Optional[AuthSession]) -> str:
    """Destination de la page d'accueil selon le rôle de la session."""
    if session is None:
        return LOGIN_URL
    if session.role in ADMIN_ROLES:
        return ADMIN_DASHBOARD_URL
    if session.role == Role.USER.value:
        return USER_DASHBOARD_URL
    return UNAUTHORIZED_URL


def gestionnaire_dashboard(session: AuthSession) -> Optional[str]:
    return GESTIONNAIRE_DASHBOARDS.get(session.gestionnaire_role)


def dashboard_redirect(session: Optional[AuthSession], path: str) -> Optional[str]:
    """
    Règles d'accès aux pages /dashboard.

    Returns:
        L'URL vers laquelle rediriger, ou None si la page est accessible
    """
    if session is None:
        return LOGIN_URL

    is_admin = session.role in ADMIN_ROLES
    is_user = session.role == Role.USER.value

    if path.startswith(ADMIN_DASHBOARD_URL):
        if is_admin:
            return None
        if is_user:
            return gestionnaire_dashboard(session) or USER_DASHBOARD_URL
        return UNAUTHORIZED_URL

    if path.startswith(USER_DASHBOARD_URL):
        if is_admin:
            return ADMIN_DASHBOARD_URL
        if not is_user:
            return UNAUTHORIZED_URL
        if path.rstrip("/") == USER_DASHBOARD_URL:
            return gestionnaire_dashboard(session)

    return None


class PageRedirect(Exception):
    """Interrompt le rendu d'une page par une redirection."""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


async def dashboard_session(
    request: Request,
    session: Optional[AuthSession] = Depends(get_auth_session),
) -> AuthSession:
    """
    Dépendance des pages /dashboard : applique les règles d'accès.

    Raises:
        PageRedirect: quand la page n'est pas accessible à la session
    """
    target = dashboard_redirect(session, request.url.path)
    if target is not None:
        log_access_denied(request.url.path, session.user_id if session else None, f"redirection vers {target}")
        raise PageRedirect(target)
    return session


async def resolve_params(params: Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]) -> Mapping[str, Any]:
    """Résout les paramètres de route, qu'ils soient déjà disponibles ou à attendre."""
    if inspect.isawaitable(params):
        return await params
    return params


@dataclass(frozen=True)
class PageShell:
    """Page qui affiche un seul composant recevant l'identifiant de la route."""
    component: str
    prop: str

    async def render(self, request: Request, params) -> Any:
        resolved = await resolve_params(params)
        props = {self.prop: resolved["id"]}
        return templates.TemplateResponse(
            request,
            f"components/{self.component}.html",
            {"component": self.component, "props": props, **props},
        )


# section -> (page de détail, page de modification)
ADMIN_PAGE_SHELLS = {
    "clients": (PageShell("ClientDetails", "clientId"), PageShell("ClientEdit", "clientId")),
    "gestionnaires": (
        PageShell("GestionnaireDetails", "gestionnaireId"),
        PageShell("GestionnaireEdit", "gestionnaireId"),
    ),
    "membres": (PageShell("MemberDetails", "memberId"), PageShell("EditMember", "memberId")),
    "stock": (PageShell("StockDetails", "produitId"), PageShell("StockEdit", "produitId")),
    "tontines": (PageShell("TontineDetails", "tontineId"), PageShell("TontineEdit", "tontineId")),
    "cotisations": (
        PageShell("CotisationDetails", "cotisationId"),
        PageShell("CotisationEdit", "cotisationId"),
    ),
    "creditsAlimentaires": (
        PageShell("CreditAlimentaireDetails", "creditId"),
        PageShell("CreditAlimentaireEdit", "creditId"),
    ),
}


@router.get("/", include_in_schema=False)
async def home(session: Optional[AuthSession] = Depends(get_auth_session)):
    """Redirige vers le tableau de bord adapté au rôle."""
    return redirect(root_redirect_target(session))


@router.get("/auth/login", include_in_schema=False)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.get("/unauthorized", include_in_schema=False)
async def unauthorized_page(request: Request):
    return templates.TemplateResponse(request, "unauthorized.html", {}, status_code=403)


@router.get("/dashboard/admin", include_in_schema=False)
async def admin_dashboard_page(
    request: Request,
    session: AuthSession = Depends(dashboard_session),
):
    return templates.TemplateResponse(request, "dashboard_admin.html", {"session": session})


@router.get("/dashboard/user", include_in_schema=False)
async def user_dashboard_page(
    request: Request,
    session: AuthSession = Depends(dashboard_session),
):
    return templates.TemplateResponse(request, "dashboard_user.html", {"session": session})


@router.get("/dashboard/user/{espace}", include_in_schema=False)
async def gestionnaire_dashboard_page(
    espace: str,
    request: Request,
    session: AuthSession = Depends(dashboard_session),
):
    role = ESPACES_GESTIONNAIRE.get(espace)
    if role is None:
        raise ApiError("Page introuvable", 404)
    return templates.TemplateResponse(
        request,
        "dashboard_gestionnaire.html",
        {"session": session, "espace": espace, "role_gestionnaire": role},
    )


@router.get("/dashboard/admin/{section}/{id}", include_in_schema=False)
async def admin_detail_page(
    section: str,
    request: Request,
    session: AuthSession = Depends(dashboard_session),
):
    shells = ADMIN_PAGE_SHELLS.get(section)
    if shells is None:
        raise ApiError("Page introuvable", 404)
    return await shells[0].render(request, request.path_params)


@router.get("/dashboard/admin/{section}/{id}/edit", include_in_schema=False)
async def admin_edit_page(
    section: str,
    request: Request,
    session: AuthSession = Depends(dashboard_session),
):
    shells = ADMIN_PAGE_SHELLS.get(section)
    if shells is None:
        raise ApiError("Page introuvable", 404)
    return await shells[1].render(request, request.path_params)
