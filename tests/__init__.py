"""Test suite for the leadform intake pipeline.

This package contains tests for:
- Field formatters (currency, phone, free text, numeric key guard)
- Validation engine (per-field rules, cost rule overlap)
- Form state store (formatting routes, clear-on-edit, role toggling)
- Submission state machine and orchestrator (webhook success and failure)
- Event stream and settings
- End-to-end intake scenarios
"""
