from __future__ import annotations

from typing import List, Tuple

from ..context import SystemContext
from ..types import Command, Config, File, Filesystem


class FilesPhase:
    """Carry declared files into the output; contents are resolved downstream."""

    phase_id = "50_files"

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        files: Filesystem = {}
        for path, f in cfg.filesystem.items():
            if ctx.applies(f.flags):
                files[path] = f
        for dest, src in cfg.files.items():
            files[dest] = File(content_from_file=src)
        for dest, src in cfg.templates.items():
            files[dest] = File(template=src)
        return [], files
