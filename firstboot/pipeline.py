from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple, runtime_checkable

from .context import SystemContext
from .errors import PhaseError
from .types import Command, Config, Filesystem

logger = logging.getLogger(__name__)


class Phase(Protocol):
    phase_id: str


@runtime_checkable
class FlagsPhase(Protocol):
    """A phase that may add tags before anything is applied."""

    phase_id: str

    def process_flags(self, cfg: Config, ctx: SystemContext) -> SystemContext:
        ...


@runtime_checkable
class ApplyPhase(Protocol):
    """A phase that emits commands and files."""

    phase_id: str

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    commands: List[Command]
    filesystem: Filesystem
    context: SystemContext
    ran_phases: List[str]

    @property
    def script_lines(self) -> List[str]:
        return [c.cmd for c in self.commands]


def process_flags(cfg: Config, ctx: SystemContext, phases: Sequence[Phase]) -> SystemContext:
    """Tag pass: single, forward-only. Later phases see earlier additions."""

    for phase in phases:
        if not isinstance(phase, FlagsPhase):
            continue
        before = ctx.flags
        ctx = phase.process_flags(cfg, ctx)
        added = [f.value for f in ctx.flags if f not in before]
        if added:
            logger.info("Phase %s added flags: %s", phase.phase_id, ",".join(added))
    return ctx


def run_pipeline(
    *,
    cfg: Config,
    ctx: SystemContext,
    phases: Sequence[Phase],
) -> PipelineResult:
    """Run the tag pass then the apply pass over a private copy of ``cfg``.

    The first failing apply phase stops the run; its error is raised as a
    PhaseError and nothing produced so far is returned.
    """

    cfg = copy.deepcopy(cfg)
    ctx = process_flags(cfg, ctx, phases)
    logger.info("Active flags: %s", ",".join(f.value for f in ctx.flags) or "(none)")

    commands: List[Command] = []
    filesystem: Filesystem = {}
    ran: List[str] = []

    for phase in phases:
        if not isinstance(phase, ApplyPhase):
            continue
        logger.info("Running phase %s", phase.phase_id)
        try:
            cmds, files = phase.apply(cfg, ctx)
        except Exception as e:
            logger.error("Phase %s failed: %s", phase.phase_id, e)
            raise PhaseError(phase.phase_id, e) from e
        commands.extend(cmds)
        filesystem.update(files)
        ran.append(phase.phase_id)

    return PipelineResult(commands=commands, filesystem=filesystem, context=ctx, ran_phases=ran)
