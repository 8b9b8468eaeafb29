"""File-based search provider discovery.

Scans the user-level and project-level provider directories for ``*.py``
files.  Each file exports either ``provider`` (a provider object) or
``create_provider`` (a zero-argument factory returning one).
"""

import importlib.util
from pathlib import Path
from typing import List, Optional

from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger
from web_scout.web.registry import is_provider
from web_scout.web.search_provider import SearchProvider

log = get_logger(__name__)


def provider_dirs(cwd: str) -> List[Path]:
    return [
        Path(settings.user_provider_dir).expanduser(),
        Path(cwd) / settings.project_provider_dir,
    ]


def _load_file(path: Path) -> Optional[SearchProvider]:
    module_spec = importlib.util.spec_from_file_location(f"web_scout_provider_{path.stem}", path)
    if module_spec is None or module_spec.loader is None:
        return None
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)

    exported = getattr(module, "provider", None)
    if exported is None:
        factory = getattr(module, "create_provider", None)
        exported = factory() if callable(factory) else None
    return exported if is_provider(exported) else None


def discover_file_providers(cwd: str) -> List[SearchProvider]:
    """Load every provider file found; files that fail to load are skipped."""
    providers: List[SearchProvider] = []
    for directory in provider_dirs(cwd):
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*.py")):
            if not path.is_file():
                continue
            try:
                provider = _load_file(path)
            except Exception as exc:
                log.debug("Skipping provider file %s: %s", path, exc)
                continue
            if provider is None:
                log.debug("No provider exported by %s", path)
                continue
            log.info("Discovered search provider '%s' in %s", provider.name, path)
            providers.append(provider)
    return providers
