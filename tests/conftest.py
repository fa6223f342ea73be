"""Shared fixtures for the generator tests."""

import pytest

from dart_data_class.codegen import generate_data_classes


POINT_SOURCE = """class Point {
  final int x;
  final int y;
}
"""

USER_SOURCE = """import 'package:flutter/material.dart';

enum Role { admin, member }

class User {
  final String name;
  // enum
  final Role role;
  final DateTime createdAt;
  final Color color;
  final Address? address;
  final List<Address> addresses;
  final List<String> tags;
}
"""


@pytest.fixture
def point_source() -> str:
    return POINT_SOURCE


@pytest.fixture
def user_source() -> str:
    return USER_SOURCE


@pytest.fixture
def run():
    """Generate members for a buffer and return the successful result."""

    def _run(text, context=None, selector=None, confirm=None, **overrides):
        result = generate_data_classes(
            text,
            config=overrides or None,
            context=context,
            selector=selector,
            confirm=confirm,
        )
        assert result.success, result.error_message
        return result

    return _run
