"""Git operations module.

Usage:
    from mbranch.git import Repository

    repo = Repository(ShellRunner(cwd=Path("/path/to/repo")))
    result = repo.checkout_new_branch("foo-2.3.x", "foo-2.3.5")
"""

from mbranch.git.repository import Repository

__all__ = ["Repository"]
