"""
Watch mode.

Polls the model source files and regenerates the interfaces whenever their
content changes. Each generation runs in a fresh interpreter so that edited
model modules are imported anew.
"""

import hashlib
import inspect
import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from django.apps import apps
from django.utils.module_loading import import_string

from .colored_logging import log_highlight, log_progress, log_section, log_success
from .config_validation import GeneratorConfig
from .extraction.discovery import FRAMEWORK_APP_PREFIX


logger = logging.getLogger(__name__)

GENERATION_MODULE = "ts_auto_generator.cli"


def source_files(root: Path) -> List[Path]:
    """All ``*.py`` files below ``root`` (or ``root`` itself when it is a file)."""
    if root.is_file():
        return [root] if root.suffix == ".py" else []
    if not root.is_dir():
        return []
    return sorted(path for path in root.rglob("*.py") if path.is_file())


def fingerprint(roots: Iterable[Path]) -> str:
    """
    Content hash of the model sources.

    SHA-256 over the sorted ``(relative path, md5 of content)`` pairs of
    every Python file below the roots. Any edit, addition or removal changes
    the result; modification times do not.
    """
    entries = []
    for index, root in enumerate(roots):
        root = Path(root)
        base = root.parent if root.is_file() else root
        for path in source_files(root):
            try:
                content_hash = hashlib.md5(path.read_bytes()).hexdigest()
            except OSError as e:
                # Files can disappear between listing and reading
                logger.debug(f"Cannot read {path}: {e}")
                continue
            entries.append((f"{index}:{os.path.relpath(path, base)}", content_hash))

    digest = hashlib.sha256()
    for relative_path, content_hash in sorted(entries):
        digest.update(f"{relative_path}\0{content_hash}\n".encode("utf-8"))
    return digest.hexdigest()


def model_source_paths(config: GeneratorConfig) -> List[Path]:
    """
    Directories and files holding the models that are generated.

    Requires the Django app registry to be ready.
    """
    paths: List[Path] = []
    if config.app_labels:
        app_configs = []
        for label in config.app_labels:
            try:
                app_configs.append(apps.get_app_config(label))
            except LookupError:
                logger.warning(f"App label {label} is not installed; not watching it")
    else:
        app_configs = [
            app_config
            for app_config in apps.get_app_configs()
            if not app_config.name.startswith(FRAMEWORK_APP_PREFIX)
        ]
    for app_config in app_configs:
        paths.append(Path(app_config.path))

    for dotted_path in config.additional_models:
        try:
            source = inspect.getsourcefile(import_string(dotted_path))
        except (ImportError, TypeError) as e:
            logger.warning(f"Cannot locate source of {dotted_path}: {e}")
            continue
        if source:
            paths.append(Path(source))

    unique = []
    for path in paths:
        if path not in unique:
            unique.append(path)
    return unique


def generation_command(
    config_path: Optional[str] = None, extra_args: Sequence[str] = ()
) -> List[str]:
    """Command line of one generation run in a child interpreter."""
    command = [sys.executable, "-m", GENERATION_MODULE]
    if config_path:
        command.extend(["--config", config_path])
    command.extend(extra_args)
    return command


def run_generation(command: Sequence[str]) -> bool:
    """
    Run one generation in a child process.

    Returns:
        True when the child exited successfully
    """
    try:
        result = subprocess.run(list(command), check=False)
    except OSError as e:
        logger.error(f"Could not start generation: {e}")
        return False
    if result.returncode != 0:
        logger.error(f"Generation failed with exit code {result.returncode}; still watching")
        return False
    log_success(logger, "Regeneration complete")
    return True


def watch(
    roots: Sequence[Path],
    command: Sequence[str],
    interval: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    max_checks: Optional[int] = None,
) -> None:
    """
    Regenerate on every change of the model sources.

    Generates once at start, then compares the fingerprint every
    ``interval`` seconds. Runs until interrupted unless ``max_checks``
    bounds the number of polls.

    Args:
        roots: Model source directories or files
        command: Generation command (see :func:`generation_command`)
        interval: Seconds between checks
        sleep: Sleep function
        max_checks: Number of polls before returning; None polls forever
    """
    log_section(logger, "Watch mode")
    for root in roots:
        logger.info(f"  • {root}")
    log_progress(logger, f"Watching {len(roots)} model source paths for changes...")

    current = fingerprint(roots)
    run_generation(command)

    checks = 0
    while max_checks is None or checks < max_checks:
        sleep(interval)
        checks += 1
        latest = fingerprint(roots)
        if latest == current:
            continue
        current = latest
        log_highlight(logger, "Model changes detected, regenerating...")
        run_generation(command)
