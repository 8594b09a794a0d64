"""Shared test fixtures."""

import pytest

from orgpulse.models.node import OrgTree
from orgpulse.session import build_org
from tests.unit.fakes import SMALL_ORG, make_tree


@pytest.fixture
def small_tree() -> OrgTree:
    """Return a fresh 12-node tree: two branches, one deep and one thin.

    root
    ├── b1
    │   ├── d1
    │   │   ├── p1 ── t1, t2
    │   │   └── p2
    │   └── d2
    └── b2
        └── d3
            └── p3 ── t3
    """
    return make_tree(SMALL_ORG)


@pytest.fixture(scope="session")
def balanced_org() -> OrgTree:
    """Return the scored seed-42 balanced organization.

    Shared across the whole run; tests must not mutate it.
    """
    return build_org(42, "balanced")
