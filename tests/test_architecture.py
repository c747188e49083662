"""Architectural boundary tests using pytest-archon.

These tests verify that the codebase follows clean architecture principles:
- Domain layer has no dependencies on adapters or application
- Application services don't depend on adapters
- Adapters can depend on domain
- Only the CLI wires adapters and application together
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models should only import the standard library, each other and domain errors."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("tcdd_routes.domain.models*")
        .should_not_import("tcdd_routes.adapters*")
        .should_not_import("tcdd_routes.application*")
        .should_not_import("tcdd_routes.domain.ports*")
        .may_import("tcdd_routes.domain.models*")
        .may_import("tcdd_routes.domain.exceptions")
        .check("tcdd_routes")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Domain ports (interfaces) should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("tcdd_routes.domain.ports*")
        .should_not_import("tcdd_routes.adapters*")
        .should_not_import("tcdd_routes.application*")
        .may_import("tcdd_routes.domain*")
        .check("tcdd_routes")
    )


def test_application_services_dont_import_adapters() -> None:
    """Application services should not depend on adapters (infrastructure layer)."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("tcdd_routes.application*")
        .should_not_import("tcdd_routes.adapters*")
        .should_not_import("tcdd_routes.cli")
        .may_import("tcdd_routes.domain*")
        .may_import("tcdd_routes.application*")
        .check("tcdd_routes")
    )


def test_adapters_dont_import_application() -> None:
    """Adapters should not import application services (to avoid cycles)."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("tcdd_routes.adapters*")
        .should_not_import("tcdd_routes.application*")
        .should_not_import("tcdd_routes.cli")
        .may_import("tcdd_routes.domain*")
        .may_import("tcdd_routes.adapters*")
        .check("tcdd_routes", only_direct_imports=True)
    )


def test_no_circular_dependencies_in_domain() -> None:
    """Domain layer should not have circular dependencies."""
    (
        archrule("domain no cycles", comment="Domain layer should not have circular dependencies")
        .match("tcdd_routes.domain*")
        .should_not_import("tcdd_routes.adapters*")
        .should_not_import("tcdd_routes.application*")
        .may_import("tcdd_routes.domain*")
        .check("tcdd_routes", only_direct_imports=True)
    )
