"""Test suite for the quicktest package.

This package contains unit and integration tests validating
expression parsing and evaluation, member resolution, value
serialization, test execution semantics and YAML test documents.
"""
