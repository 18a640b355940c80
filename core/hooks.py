"""Plugin/hook system for RepRing.

Lifecycle hooks run shell commands when something worth celebrating or
recording happens. Configured via hooks.yaml in the workspace root.

Hook points:
- on_goal_reached
- on_fast_start, on_fast_end
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from core.fileio import read_yaml
from core.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_goal_reached",
    "on_fast_start",
    "on_fast_end",
}

DEFAULT_TIMEOUT = 30


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks configuration from hooks.yaml."""
    if root is None:
        root = workspace_root()
    path = hooks_config_path(root)
    if not path.exists():
        return {}
    return read_yaml(path)


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run all hooks registered for a given hook point.

    Context is passed as JSON via stdin to each hook subprocess.
    Returns list of results with stdout/stderr and exit codes.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.warning("Unknown hook point: %s", hook_point)
        return []

    if root is None:
        root = workspace_root()

    config = load_hooks_config(root)
    hooks = config.get(hook_point, [])

    if not hooks or not isinstance(hooks, list):
        return []

    results = []
    context_json = json.dumps(context, ensure_ascii=False)

    for hook in hooks:
        if isinstance(hook, str):
            command = hook
            timeout = DEFAULT_TIMEOUT
        elif isinstance(hook, dict):
            command = hook.get("command", "")
            timeout = hook.get("timeout", DEFAULT_TIMEOUT)
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0:
                logger.warning(
                    "Hook %r (%s) has invalid timeout %r, using %ss",
                    hook.get("command"), hook_point, timeout, DEFAULT_TIMEOUT,
                )
                timeout = DEFAULT_TIMEOUT
        else:
            continue

        if not command or not isinstance(command, str):
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=context_json,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:4096]  # Cap output
            result["stderr"] = proc.stderr[:4096]
            if proc.returncode != 0:
                logger.warning("Hook %r (%s) exited with %d", command, hook_point, proc.returncode)
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout}s"
            logger.warning("Hook %r (%s) timed out after %ss", command, hook_point, timeout)
        except Exception as e:
            result["exit_code"] = -1
            result["error"] = str(e)
            logger.warning("Hook %r (%s) failed: %s", command, hook_point, e)

        results.append(result)

    return results
