"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import git
import pytest


@pytest.fixture
def scenario_authorship():
    """Four files: Alice owns two, Bob and Charlie one each."""
    return {
        "f1": {"Alice": 100},
        "f2": {"Alice": 80, "Bob": 20},
        "f3": {"Bob": 100},
        "f4": {"Charlie": 100},
    }


@pytest.fixture
def now():
    return datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def git_repo(tmp_path):
    """A small repository: Alice writes a.py, Bob writes b.py and extends a.py."""
    repo = git.Repo.init(tmp_path)
    alice = git.Actor("Alice", "alice@example.com")
    bob = git.Actor("Bob", "bob@example.com")

    (tmp_path / "a.py").write_text("one = 1\ntwo = 2\nthree = 3\n")
    repo.index.add(["a.py"])
    repo.index.commit("add a", author=alice, committer=alice)

    (tmp_path / "b.py").write_text("print('b')\n")
    repo.index.add(["b.py"])
    repo.index.commit("add b", author=bob, committer=bob)

    (tmp_path / "a.py").write_text("one = 1\ntwo = 2\nthree = 3\nfour = 4\n")
    repo.index.add(["a.py"])
    repo.index.commit("extend a", author=bob, committer=bob)

    repo.close()
    return tmp_path
