"""firstboot: declarative first-boot provisioning, compiled per OS.

Core design goals:
- Platform-aware tags drive what applies
- Pure command generation (nothing is executed)
- Ordered, fail-fast phases
- Deterministic output
"""

__all__ = []
