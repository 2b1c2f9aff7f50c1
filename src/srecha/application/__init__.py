"""Application layer: DTOs and service wiring."""

from srecha.application.container import ServiceContainer, build_container

__all__ = ["ServiceContainer", "build_container"]
