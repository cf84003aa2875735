# pdt/config.py
"""
Load YAML config and env overrides.

Config precedence (low → high):
  1) Defaults in code
  2) YAML file: ~/.pdt.yml or ~/.pdt.yaml
  3) Environment variables: PDT_FORMAT, PDT_UTC
  4) CLI flags (applied in cli.py)

Example ~/.pdt.yml:
  format: rfc-3339      # iso | rfc-3339 | epoch
  utc: false
  table:
    box: true
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

FORMATS = ("iso", "rfc-3339", "epoch")

DEFAULTS: Dict[str, Any] = {
    "format": "iso",
    "utc": False,
    "table": {"box": True},
}

_TRUE = ("1", "true", "yes", "on")

def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring config %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected a mapping", path)
        return {}
    return data

def load() -> Dict[str, Any]:
    cfg = {**DEFAULTS, "table": dict(DEFAULTS["table"])}
    home = Path.home()
    for fname in (".pdt.yml", ".pdt.yaml"):
        data = _read_yaml(home / fname)
        if data:
            # deep merge for 'table' subdict
            cfg.update({k: v for k, v in data.items() if k != "table"})
            if "table" in data:
                cfg["table"] = {**cfg["table"], **(data["table"] or {})}
            break

    # env overrides
    if os.getenv("PDT_FORMAT"):
        cfg["format"] = os.getenv("PDT_FORMAT").strip().lower()
    if os.getenv("PDT_UTC"):
        cfg["utc"] = os.getenv("PDT_UTC").strip().lower() in _TRUE

    fmt = str(cfg.get("format") or "iso").lower()
    if fmt not in FORMATS:
        logger.warning("unknown output format %r, using iso", fmt)
        fmt = "iso"
    cfg["format"] = fmt
    return cfg
