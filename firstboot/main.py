from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import load_config
from .context import SystemContext
from .errors import ConfigError
from .flags import parse_flags
from .lib.os_release import OS_RELEASE_PATH
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .phases import build_phases
from .pipeline import PipelineResult, run_pipeline
from .platforms import Platform, detect_platform
from .render import RENDERERS

logger = logging.getLogger(__name__)


def _parse_vars(pairs: Sequence[str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ConfigError(f"--var expects KEY=VALUE, got {pair!r}")
        out[key] = value
    return out


def build_context(
    platform: Platform,
    *,
    os_release: str = OS_RELEASE_PATH,
    tags: Sequence[str] = (),
    variables: Optional[Dict[str, Any]] = None,
    name: str = "firstboot",
) -> SystemContext:
    """Initial context: platform tags first, then user-supplied tags."""

    vars_: Dict[str, Any] = {
        "platform": platform.name,
        "version_codename": platform.get_version_code_name(os_release),
    }
    vars_.update(variables or {})
    ctx = SystemContext(flags=platform.get_tags(os_release), vars=vars_, name=name)
    return ctx.with_flags(*parse_flags(tags))


def compile_config(
    config_paths: Sequence[str],
    *,
    os_release: str = OS_RELEASE_PATH,
    tags: Sequence[str] = (),
    variables: Optional[Dict[str, Any]] = None,
    name: str = "firstboot",
) -> PipelineResult:
    cfg = load_config(*config_paths)
    platform = detect_platform(os_release)
    ctx = build_context(platform, os_release=os_release, tags=tags, variables=variables, name=name)
    return run_pipeline(cfg=cfg, ctx=ctx, phases=build_phases(platform))


def run(
    *,
    config_paths: List[str],
    os_release: str = OS_RELEASE_PATH,
    tags: Sequence[str] = (),
    variables: Sequence[str] = (),
    name: str = "firstboot",
    fmt: str = "sh",
    output: Optional[str] = None,
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    verbose: bool = False,
) -> str:
    """Compile configs for this host and write the rendering to ``output`` or stdout."""

    configure_logging(log_path=log_path, level=logging.DEBUG if verbose else logging.INFO)

    try:
        result = compile_config(
            config_paths,
            os_release=os_release,
            tags=tags,
            variables=_parse_vars(variables),
            name=name,
        )
    except Exception:
        logger.exception("Compilation failed")
        raise

    rendered = RENDERERS[fmt](result)
    if output:
        p = Path(output)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(rendered, encoding="utf-8")
        logger.info("Wrote %s (%d commands, %d files)", output, len(result.commands), len(result.filesystem))
    else:
        sys.stdout.write(rendered)
    return rendered


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="firstboot")
    p.add_argument("-c", "--config", action="append", required=True, help="Provisioning config (yaml|json), repeatable")
    p.add_argument("--os-release", default=OS_RELEASE_PATH, help="OS identity file used for platform detection")
    p.add_argument("--tag", action="append", default=[], help="Extra flag to activate (e.g. kubernetes)")
    p.add_argument("--var", action="append", default=[], help="Context variable KEY=VALUE")
    p.add_argument("--name", default="firstboot", help="Run name")
    p.add_argument("--format", default="sh", choices=sorted(RENDERERS), help="Output format")
    p.add_argument("-o", "--output", default=None, help="Write output here instead of stdout")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)

    run(
        config_paths=args.config,
        os_release=args.os_release,
        tags=args.tag,
        variables=args.var,
        name=args.name,
        fmt=args.format,
        output=args.output,
        log_path=args.log,
        verbose=args.verbose,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
