"""
Label lookup API.

This module provides a read-only REST API over a LabelRegistry, so that
services in other processes can resolve system labels and family
defaults.
"""

import logging

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from ..errors import ConfigurationError, NotFoundError, ValidationError
from ..models import LabeledModel
from ..registry import LabelRegistry

logger = logging.getLogger(__name__)


class LabelResponse(BaseModel):
    """A resolved labeled entity."""

    family: str
    system_label: str
    label: str
    symbol: str


class HealthResponse(BaseModel):
    status: str
    families: int


def _to_response(family: str, entity: LabeledModel) -> LabelResponse:
    return LabelResponse(
        family=family,
        system_label=entity.get_system_label() or "",
        label=str(entity),
        symbol=entity.to_symbol(),
    )


def get_registry(request: Request) -> LabelRegistry:
    """Get the registry attached to the application."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Label registry not configured")
    return registry


def _family_class(registry: LabelRegistry, family: str) -> type[LabeledModel]:
    try:
        return registry.get_family(family)
    except ConfigurationError:
        raise HTTPException(status_code=404, detail=f"Unknown label family: {family}")


def create_app(registry: LabelRegistry | None = None) -> FastAPI:
    """
    Create the API application.

    Args:
        registry: Registry to serve; may also be attached later through
            ``app.state.registry``

    Returns:
        The FastAPI application
    """
    app = FastAPI(
        title="acts_as_label",
        description="Resolve labeled entities by system label",
        version="0.1.0",
    )
    app.state.registry = registry

    @app.get("/health", response_model=HealthResponse)
    def health_check(registry: LabelRegistry = Depends(get_registry)) -> HealthResponse:
        return HealthResponse(status="ok", families=len(registry.families()))

    @app.get("/families", response_model=list[str])
    def list_families(registry: LabelRegistry = Depends(get_registry)) -> list[str]:
        return registry.families()

    @app.get("/families/{family}/default", response_model=LabelResponse)
    def get_default(family: str, registry: LabelRegistry = Depends(get_registry)) -> LabelResponse:
        """
        Get the default entity of a family.

        Args:
            family: Name of the label family
            registry: Label registry

        Returns:
            The default entity
        """
        family_class = _family_class(registry, family)
        try:
            return _to_response(family, registry.default(family_class))
        except NotFoundError as e:
            logger.warning("No default for %s: %s", family, e)
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/families/{family}/labels/{code}", response_model=LabelResponse)
    def get_label(family: str, code: str, registry: LabelRegistry = Depends(get_registry)) -> LabelResponse:
        """
        Resolve an entity by system label.

        The code may be given in any case, e.g. ``monthly`` or ``MONTHLY``.

        Args:
            family: Name of the label family
            code: The system label to resolve
            registry: Label registry

        Returns:
            The matching entity
        """
        family_class = _family_class(registry, family)
        try:
            return _to_response(family, registry.resolve_dynamic(family_class, code))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    return app


def start_api(registry: LabelRegistry, host: str = "127.0.0.1", port: int = 8000) -> None:
    """
    Start the API server.

    Args:
        registry: Registry to serve
        host: Host to bind to
        port: Port to bind to
    """
    uvicorn.run(create_app(registry), host=host, port=port)
