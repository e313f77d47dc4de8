from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provide",
    "as_",
    "inject",
]

import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.wiring import inject, Provide, TypeModifier

TAs = t.TypeVar("TAs")


def as_(type_: t.Type[TAs]) -> TypeModifier:  # noqa: E302
    """Return custom type modifier."""
    # replace wiring.as_ because that one has typing issues
    return TypeModifier(type_)


class NotReady(object):
    """Placeholder for container values only known once the container is booted."""

    _instance: t.ClassVar[NotReady | None] = None

    def __new__(cls) -> NotReady:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<NotReady>"


def wire(container: Container, *packages: str) -> None:
    """Wire `container` into every module of the named packages."""
    container.wire(packages=list(packages))
    wiring.register_loader_containers(container)
