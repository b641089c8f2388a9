from __future__ import annotations

import json
import logging
import shlex
from dataclasses import asdict
from typing import Any, Dict, List

from .pipeline import PipelineResult
from .platforms.base import heredoc_delimiter
from .types import File

logger = logging.getLogger(__name__)


def to_dict(result: PipelineResult) -> Dict[str, Any]:
    files: Dict[str, Any] = {}
    for path, f in result.filesystem.items():
        entry = {k: v for k, v in asdict(f).items() if v and k != "flags"}
        files[path] = entry
    return {
        "name": result.context.name,
        "flags": [f.value for f in result.context.flags],
        "commands": result.script_lines,
        "files": files,
    }


def to_json(result: PipelineResult) -> str:
    return json.dumps(to_dict(result), indent=2) + "\n"


def to_yaml(result: PipelineResult) -> str:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required for YAML output") from e
    return yaml.safe_dump(to_dict(result), sort_keys=False)


def _file_lines(path: str, f: File) -> List[str]:
    q = shlex.quote(path)
    lines = [f'mkdir -p "$(dirname {q})"']
    if f.content_from_url:
        lines.append(f"curl -fsSL {shlex.quote(f.content_from_url)} -o {q}")
    else:
        body = f.content if f.content.endswith("\n") or not f.content else f.content + "\n"
        eof = heredoc_delimiter(body, "FIRSTBOOT_EOF")
        lines.append(f"cat <<'{eof}' >{q}\n{body}{eof}")
    if f.permissions:
        lines.append(f"chmod {f.permissions} {q}")
    if f.owner:
        lines.append(f"chown {f.owner} {q}")
    return lines


def to_shell(result: PipelineResult) -> str:
    """Render files first, then commands, as one bash script.

    Entries that reference a local file or template need a collaborator to
    materialize them and are left out with a warning.
    """

    out = ["#!/bin/bash", "set -o errexit", "set -o verbose", ""]
    for path, f in result.filesystem.items():
        if f.content_from_file or f.template:
            logger.warning("Skipping %s: content must be materialized before rendering a script", path)
            continue
        out.extend(_file_lines(path, f))
    out.append("")
    out.extend(result.script_lines)
    return "\n".join(out) + "\n"


RENDERERS = {
    "sh": to_shell,
    "json": to_json,
    "yaml": to_yaml,
}
