"""Working-copy acquisition: use a local checkout or clone a remote repository."""

import shutil
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import git  # GitPython


def repo_name_from_url(url: str) -> str:
    """Last path component of a repository URL without the ``.git`` suffix."""
    path = urlparse(url).path if "://" in url else url.split(":", 1)[-1]
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name or "repo"


class RepoCloner:
    """Provides a local working copy for authorship analysis."""

    def __init__(self, token: Optional[str] = None) -> None:
        self.token = token
        self._clone_dir: Optional[Path] = None

    @property
    def clone_path(self) -> Optional[Path]:
        return self._clone_dir

    def acquire(self, target: str) -> Path:
        """Return a local path for ``target``, cloning it when it is not a directory."""
        local = Path(target).expanduser()
        if local.is_dir():
            return local.resolve()
        return self.clone(target)

    def _auth_url(self, url: str) -> str:
        if self.token and self.token.strip() and url.startswith("https://github.com/"):
            return url.replace("https://", f"https://x-access-token:{self.token}@", 1)
        return url

    def clone(self, url: str) -> Path:
        """Clone the full history (blame needs it) and return the local path."""
        name = repo_name_from_url(url)
        self._clone_dir = Path(tempfile.mkdtemp(prefix=f"busfactor-{name}-"))
        auth_url = self._auth_url(url)

        env = {"GIT_TERMINAL_PROMPT": "0"}  # Never prompt for credentials

        try:
            git.Repo.clone_from(auth_url, str(self._clone_dir), env=env)
        except git.exc.GitCommandError:
            # Token rejected (e.g. SAML-protected org) — retry anonymously
            if auth_url != url:
                shutil.rmtree(self._clone_dir, ignore_errors=True)
                self._clone_dir = Path(tempfile.mkdtemp(prefix=f"busfactor-{name}-"))
                git.Repo.clone_from(url, str(self._clone_dir), env=env)
            else:
                self.cleanup()
                raise
        return self._clone_dir

    def cleanup(self) -> None:
        """Remove the cloned directory. Local checkouts are never touched."""
        if self._clone_dir and self._clone_dir.exists():
            shutil.rmtree(self._clone_dir, ignore_errors=True)
        self._clone_dir = None
