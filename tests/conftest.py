"""Shared pytest fixtures for easyaudit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Get test fixtures directory."""
    return Path(__file__).parent / "fixtures"


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def minimal_config_data() -> dict[str, Any]:
    """Smallest configuration that passes validation."""
    return {
        "user_property": "username",
        "audit_log_class": "App\\Entity\\AuditLog",
    }


@pytest.fixture
def full_config_data(minimal_config_data: dict[str, Any]) -> dict[str, Any]:
    """Configuration using every option, with mixed channel rule shapes."""
    return {
        **minimal_config_data,
        "resolver": "app.audit.event_resolver",
        "doctrine_event_resolver": "app.audit.doctrine_resolver",
        "default_logger": False,
        "doctrine_objects": {"App\\Entity\\Post": ["created", "deleted"]},
        "events": ["security.interactive_login", "app.custom_event"],
        "custom_resolvers": {"security.interactive_login": "app.audit.login_resolver"},
        "logger_channel": {
            "xiidea.easy_audit.logger.service": ["info", "debug"],
            "file.logger": "!doctrine",
            "mail.logger": {"type": "exclusive", "elements": ["security"]},
            "disabled.logger": [],
        },
    }
