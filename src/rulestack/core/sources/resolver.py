"""Source parsing, merging and resolution.

Local sources are used in place. Git sources are cloned into a cache
directory (one checkout per normalized URL) and fast-forwarded on later
runs. Either way the resolved directory must contain ``repo.yaml``.
"""
from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence

from rulestack.core.constants import (
    DEFAULT_OPTIONS,
    GLOBAL_SOURCES_APPEND,
    REPO_FILE,
)
from rulestack.core.exceptions import ConfigError, SourceResolutionError
from rulestack.core.utils.io import ensure_directory

from .models import GIT, LOCAL, ResolvedSource, Source

logger = logging.getLogger(__name__)

_GIT_PREFIXES = ("https://", "http://", "git@", "git://")
_SCHEME_CRED_RE = re.compile(r"([a-zA-Z][a-zA-Z0-9+.-]*://)([^\s/@]+(:[^\s/@]*)?@)")


def detect_source_kind(raw: str) -> str:
    """Classify a bare source string as ``git`` or ``local``."""
    if raw.startswith(_GIT_PREFIXES) or raw.endswith(".git"):
        return GIT
    return LOCAL


def parse_source(raw: Any) -> Source:
    """Parse a config entry (string or mapping) into a :class:`Source`.

    Raises:
        ConfigError: If the entry is malformed.
    """
    if isinstance(raw, str):
        if not raw.strip():
            raise ConfigError("Source must be a non-empty string")
        return Source(kind=detect_source_kind(raw), location=raw)

    if not isinstance(raw, Mapping):
        raise ConfigError(f"Invalid source entry: {raw!r}")

    kind = raw.get("type")
    name = raw.get("name") or None
    if kind == GIT:
        if not raw.get("url"):
            raise ConfigError("Git source must have a url property")
        return Source(kind=GIT, location=str(raw["url"]), name=name)
    if kind == LOCAL:
        if not raw.get("path"):
            raise ConfigError("Local source must have a path property")
        return Source(kind=LOCAL, location=str(raw["path"]), name=name)
    raise ConfigError(f"Invalid source type: {kind}")


def validate_sources(raw: Any) -> List[str]:
    """Return a list of error messages for a ``sources`` config value."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        return ["sources must be an array"]
    errors: List[str] = []
    for index, entry in enumerate(raw):
        try:
            parse_source(entry)
        except ConfigError as exc:
            errors.append(f"sources[{index}]: {exc}")
    return errors


def merge_sources(
    project_sources: Sequence[Source],
    global_sources: Sequence[Source],
    options: Mapping[str, Any] | None = None,
) -> List[Source]:
    """Combine global and project sources according to the config options.

    ``ignoreGlobalSources`` drops the global list; ``globalSourcesPosition``
    places it before (``prepend``, the default) or after (``append``) the
    project list.
    """
    opts = {**DEFAULT_OPTIONS, **dict(options or {})}
    if opts.get("ignoreGlobalSources"):
        return list(project_sources)
    if opts.get("globalSourcesPosition") == GLOBAL_SOURCES_APPEND:
        return [*project_sources, *global_sources]
    return [*global_sources, *project_sources]


def normalize_git_url(url: str) -> str:
    """Turn a clone URL into a flat cache directory name.

    Examples:
        >>> normalize_git_url("https://github.com/acme/rules.git")
        'github.com-acme-rules'
        >>> normalize_git_url("git@github.com:acme/rules.git")
        'github.com-acme-rules'
    """
    value = re.sub(r"^https?://", "", url)
    value = re.sub(r"^git@", "", value)
    value = re.sub(r"^git://", "", value)
    value = re.sub(r"\.git$", "", value)
    value = value.replace(":", "-").replace("/", "-")
    return re.sub(r"[^a-zA-Z0-9\-_.]", "_", value)


def redact_credentials(text: str) -> str:
    """Redact ``user:token@`` fragments from URLs embedded in ``text``."""
    return _SCHEME_CRED_RE.sub(r"\1<redacted>@", str(text))


def is_content_repo(path: Path) -> bool:
    return (Path(path) / REPO_FILE).is_file()


class SourceResolver:
    """Resolves sources to local directories.

    Args:
        cache_dir: Directory holding git checkouts
        base_dir: Directory relative local paths are resolved against
    """

    def __init__(self, cache_dir: Path, *, base_dir: Path | None = None) -> None:
        self.cache_dir = Path(cache_dir)
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def cache_path(self, url: str) -> Path:
        return self.cache_dir / normalize_git_url(url)

    def resolve(self, source: Source, *, skip_fetch: bool = False) -> ResolvedSource:
        """Resolve one source.

        Raises:
            SourceResolutionError: If the source is missing, cannot be
                fetched, or is not a content repository.
        """
        if source.is_git:
            local_path = self._resolve_git(source.location, skip_fetch=skip_fetch)
        else:
            local_path = self._resolve_local(source.location)
        logger.debug("Resolved source %s -> %s", source.display_name, local_path)
        return ResolvedSource(source=source, local_path=local_path)

    def resolve_all(
        self, sources: Iterable[Source], *, skip_fetch: bool = False
    ) -> List[ResolvedSource]:
        """Resolve sources in order, stopping at the first failure."""
        return [self.resolve(source, skip_fetch=skip_fetch) for source in sources]

    def _resolve_local(self, location: str) -> Path:
        path = Path(location).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        path = path.resolve()
        if not path.exists():
            raise SourceResolutionError(
                f"Local source path does not exist: {location}",
                context={"path": str(path)},
            )
        if not is_content_repo(path):
            raise SourceResolutionError(
                f"Local source {location} is not a valid content repo (missing {REPO_FILE})",
                context={"path": str(path)},
            )
        return path

    def _resolve_git(self, url: str, *, skip_fetch: bool) -> Path:
        safe_url = redact_credentials(url)
        checkout = self.cache_path(url)

        if skip_fetch and checkout.exists():
            logger.debug("Using cached checkout of %s", safe_url)
        elif checkout.exists():
            logger.info("Pulling latest from %s", safe_url)
            try:
                self._git(["pull", "--ff-only"], cwd=checkout)
            except SourceResolutionError:
                logger.warning("Pull failed, attempting reset for %s", safe_url)
                try:
                    self._git(["fetch", "origin"], cwd=checkout)
                    self._git(["reset", "--hard", "origin/HEAD"], cwd=checkout)
                except SourceResolutionError as exc:
                    raise SourceResolutionError(
                        f"Failed to update git source {safe_url}: {exc}",
                        context={"url": safe_url},
                    ) from exc
        else:
            logger.info("Cloning %s", safe_url)
            ensure_directory(self.cache_dir)
            try:
                self._git(["clone", url, str(checkout)], cwd=self.cache_dir)
            except SourceResolutionError as exc:
                raise SourceResolutionError(
                    f"Failed to clone git source {safe_url}: {exc}",
                    context={"url": safe_url},
                ) from exc

        if not is_content_repo(checkout):
            raise SourceResolutionError(
                f"Git source {safe_url} is not a valid content repo (missing {REPO_FILE})",
                context={"url": safe_url, "path": str(checkout)},
            )
        return checkout

    def _git(self, args: List[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise SourceResolutionError("git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            safe_cmd = redact_credentials("git " + " ".join(args))
            output = redact_credentials((exc.stderr or exc.stdout or str(exc)).strip())
            raise SourceResolutionError(f"Git command failed: {safe_cmd}\n{output}") from exc


__all__ = [
    "SourceResolver",
    "detect_source_kind",
    "is_content_repo",
    "merge_sources",
    "normalize_git_url",
    "parse_source",
    "redact_credentials",
    "validate_sources",
]
