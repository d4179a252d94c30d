"""Composition root."""

from .container import Container, build_container, build_services, get_container

__all__ = ["Container", "build_container", "build_services", "get_container"]
