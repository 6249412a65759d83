"""Test suite for easyaudit.

Test Structure:
- unit/config/: Channel rule normalization and AuditConfig schema
- unit/test_config/: File loading (JSON/YAML)
- fixtures/: Sample configuration files
- conftest.py: Shared fixtures
"""
