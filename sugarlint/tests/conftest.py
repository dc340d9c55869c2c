# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from sugarlint.rules.syntactic_sugar import reset_parse_warning


@pytest.fixture(autouse=True)
def _fresh_parse_warning() -> None:
	"""
	The parse failure warning is emitted once per process.

	Each test starts as if no warning had been logged yet so assertions on
	the log do not depend on test order.
	"""
	reset_parse_warning()
