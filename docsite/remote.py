# docsite/remote.py
"""
Remote documentation sources.

Every source answers two questions for a repo:
  list_dir(repo, path)  -> [RemoteEntry, ...]   (one directory level)
  read_file(repo, path) -> bytes

GhCliSource goes through the authenticated `gh` CLI, GitHubApiSource talks
HTTPS directly, LocalMirrorSource reads a checked-out copy of the docs.
"""

import base64, json, os, subprocess
from pathlib import Path
from typing import NamedTuple

import requests

from .errors import RemoteError

# seconds, per remote call
REMOTE_TIMEOUT = int(os.environ.get("DOCS_REMOTE_TIMEOUT", "30"))

class RemoteEntry(NamedTuple):
    name: str
    path: str
    kind: str  # "file" | "dir"

# ----- Failure classification ------------------------------------------------
def classify_failure(message: str, endpoint: str) -> RemoteError:
    """Turn a raw failure message into a RemoteError with a remediation hint."""
    text = str(message or "")
    low = text.lower()
    # `gh` itself reports 404s as "gh: Not Found (HTTP 404)", so only the
    # shell's wording counts as a missing binary
    if "command not found" in low or low.rstrip().endswith("gh: not found"):
        return RemoteError(
            "✗ GitHub CLI not found.", "missing-tool",
            "Install with: brew install gh (macOS) or see https://cli.github.com/manual/installation",
        )
    if "authentication" in low or "bad credentials" in low or "401" in low:
        return RemoteError(
            "✗ GitHub authentication failed.", "auth",
            "Run: gh auth login\n  Or set GH_TOKEN environment variable",
        )
    if "rate limit" in low or "403" in low:
        return RemoteError(
            "✗ GitHub API rate limit exceeded.", "rate-limit",
            "Wait or authenticate with MOAT_DOCS_TOKEN secret.",
        )
    if "not found" in low or "404" in low:
        return RemoteError(
            f"✗ Resource not found: {endpoint}", "not-found",
            "Check if the repository exists and is accessible.",
        )
    return RemoteError(f"GitHub API call failed for {endpoint}: {text.strip()[:500]}")

def entries_from_listing(data, endpoint: str):
    if not isinstance(data, list):
        raise RemoteError(f"Expected a directory listing from {endpoint}")
    entries = []
    for item in data:
        try:
            kind = item.get("type")
            if kind not in ("file", "dir"):
                continue
            entries.append(RemoteEntry(item["name"], item["path"], kind))
        except (AttributeError, KeyError) as e:
            raise RemoteError(f"Malformed directory listing from {endpoint}: {item!r}") from e
    return entries

def contents_endpoint(repo: str, path: str) -> str:
    return f"repos/{repo}/contents/{path.strip('/')}"

def github_token() -> str:
    for var in ("GH_TOKEN", "GITHUB_TOKEN", "MOAT_DOCS_TOKEN"):
        val = os.environ.get(var, "").strip()
        if val:
            return val
    return ""

# ----- gh CLI ----------------------------------------------------------------
class GhCliSource:
    def __init__(self, gh: str = "gh", timeout: int = REMOTE_TIMEOUT, runner=subprocess.run):
        self.gh = gh
        self.timeout = timeout
        self.runner = runner

    def _api(self, endpoint: str):
        try:
            res = self.runner(
                [self.gh, "api", endpoint],
                capture_output=True, text=True, timeout=self.timeout, check=False,
            )
        except FileNotFoundError as e:
            raise classify_failure(f"{self.gh}: command not found", endpoint) from e
        except subprocess.TimeoutExpired as e:
            raise RemoteError(f"GitHub API call timed out after {self.timeout}s: {endpoint}") from e

        if res.returncode != 0:
            raise classify_failure(res.stderr or res.stdout, endpoint)
        try:
            data = json.loads(res.stdout)
        except ValueError as e:
            raise RemoteError(f"Failed to parse GitHub API response: {res.stdout[:200]}") from e
        if not isinstance(data, (dict, list)):
            raise RemoteError(f"Invalid API response format from {endpoint}")
        return data

    def list_dir(self, repo: str, path: str):
        endpoint = contents_endpoint(repo, path)
        return entries_from_listing(self._api(endpoint), endpoint)

    def read_file(self, repo: str, path: str) -> bytes:
        endpoint = contents_endpoint(repo, path)
        data = self._api(endpoint)
        if not isinstance(data, dict) or "content" not in data:
            raise RemoteError(f"Failed to download {path}: response has no content")
        try:
            return base64.b64decode(data["content"])
        except ValueError as e:
            raise RemoteError(f"Failed to download {path}: {e}") from e

# ----- HTTPS -----------------------------------------------------------------
class GitHubApiSource:
    API_URL = "https://api.github.com"

    def __init__(self, token=None, session=None, timeout: int = REMOTE_TIMEOUT):
        self.token = github_token() if token is None else token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, endpoint: str, raw: bool = False):
        headers = {
            "Accept": "application/vnd.github.raw" if raw else "application/vnd.github+json",
            "User-Agent": "docsite-fetch",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.session.get(f"{self.API_URL}/{endpoint}", headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteError(f"GitHub API call failed for {endpoint}: {e}") from e

        if resp.status_code >= 400:
            msg = f"HTTP {resp.status_code}: {resp.text[:200]}"
            if resp.status_code == 403 and resp.headers.get("X-RateLimit-Remaining") == "0":
                msg += " (rate limit)"
            raise classify_failure(msg, endpoint)
        return resp

    def list_dir(self, repo: str, path: str):
        endpoint = contents_endpoint(repo, path)
        try:
            data = self._get(endpoint).json()
        except ValueError as e:
            raise RemoteError(f"Failed to parse GitHub API response from {endpoint}") from e
        return entries_from_listing(data, endpoint)

    def read_file(self, repo: str, path: str) -> bytes:
        return self._get(contents_endpoint(repo, path), raw=True).content

# ----- Local mirror ----------------------------------------------------------
class LocalMirrorSource:
    """A checkout of the docs repo on disk; `repo` is ignored."""

    def __init__(self, root):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path.strip("/")

    def list_dir(self, repo: str, path: str):
        folder = self._resolve(path)
        if not folder.is_dir():
            raise classify_failure("Not Found", str(folder))
        entries = []
        for child in sorted(folder.iterdir(), key=lambda p: p.name):
            rel = child.relative_to(self.root).as_posix()
            if child.is_dir():
                entries.append(RemoteEntry(child.name, rel, "dir"))
            elif child.is_file():
                entries.append(RemoteEntry(child.name, rel, "file"))
        return entries

    def read_file(self, repo: str, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise classify_failure("Not Found", str(target))
        return target.read_bytes()

def make_source(kind: str = "gh", mirror=None):
    if kind == "gh":
        return GhCliSource()
    if kind == "api":
        return GitHubApiSource()
    if kind == "local":
        if not mirror:
            raise RemoteError("Local source needs a mirror directory (--mirror or DOCS_MIRROR)")
        return LocalMirrorSource(mirror)
    raise RemoteError(f"Unknown docs source: {kind} (expected gh, api or local)")
