"""
FastAPI Authorization Dependencies

Route-level guards backed by the RBAC engine.

This module is part of MDB_RBAC.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Depends, HTTPException, Request, status

from ..core.engine import RbacEngine
from ..core.types import AccessDecision
from ..exceptions import RbacStorageError
from ..observability import set_rbac_context

logger = logging.getLogger(__name__)

OrgIdGetter = Callable[[Request], Any]


async def get_rbac_engine(request: Request) -> RbacEngine:
    """
    FastAPI Dependency: Retrieves the RBAC engine from app.state.
    """
    engine = getattr(request.app.state, "rbac_engine", None)
    if not engine:
        logger.critical("get_rbac_engine: RBAC engine not found on app.state!")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error: Authorization engine not loaded.",
        )
    return engine


def default_org_id(request: Request) -> Any:
    """Read the organization ID from the ``org_id`` path or query parameter."""
    return request.path_params.get("org_id") or request.query_params.get("org_id")


def _user_id(user: Any) -> Any:
    if isinstance(user, dict):
        return user.get("_id") or user.get("user_id") or user.get("id")
    return getattr(user, "id", None)


def require_right(right: str, get_org_id: OrgIdGetter | None = None):
    """
    Dependency Factory: Creates a dependency requiring a right in an organization.

    The authenticated user is read from ``request.state.user``. Whatever the
    reason behind a negative decision, the client gets the same 403.

    Args:
        right: Right to require (e.g. "rbac:grants:read")
        get_org_id: Callable extracting the organization ID from the request
                    (defaults to the ``org_id`` path or query parameter)
    """
    org_id_getter = get_org_id or default_org_id

    async def _check_right(
        request: Request,
        engine: RbacEngine = Depends(get_rbac_engine),
    ) -> AccessDecision:
        """Internal dependency function performing the RBAC check."""
        user = getattr(request.state, "user", None)
        user_id = _user_id(user) if user else None
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )

        org_id = org_id_getter(request)
        if not org_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="org_id is required for RBAC checks",
            )

        set_rbac_context(user_id=user_id, org_id=org_id, right=right)
        try:
            decision = await engine.check_right(user_id, org_id, right)
        except RbacStorageError as e:
            logger.exception("require_right: RBAC evaluation failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to evaluate RBAC rights",
            ) from e

        if not decision.allowed:
            logger.warning(
                f"require_right: Access DENIED for user '{user_id}' in org '{org_id}' "
                f"to '{right}' (reason={decision.reason.value})."
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )

        logger.debug(
            f"require_right: Access GRANTED for user '{user_id}' in org '{org_id}' "
            f"to '{right}' via layer '{decision.decision_layer}'."
        )
        return decision

    return _check_right
