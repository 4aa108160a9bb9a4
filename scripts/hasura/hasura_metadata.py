#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Locate and read a Hasura metadata export (metadata.yaml).

Only the `tables` section is handed on; other top-level sections
(functions, remote_schemas, ...) are reported but not used.
"""

import os
import sys
from pathlib import Path

import yaml

# ── Paths ────────────────────────────────────────────────────────────────────
SCRIPT_DIR       = Path(__file__).resolve().parent
DEFAULT_METADATA = SCRIPT_DIR / "metadata.yaml"
METADATA_ENV     = "HASURA_METADATA"


def resolve_metadata_path(arg=None) -> Path:
    """--metadata wins, then $HASURA_METADATA, then metadata.yaml next to this file."""
    chosen = arg or os.getenv(METADATA_ENV)
    if chosen:
        return (Path.cwd() / Path(chosen).expanduser()).resolve()
    return DEFAULT_METADATA


def load_metadata(path) -> dict:
    path = Path(path)
    if not path.is_file():
        raise SystemExit(f"❌ Missing {path}. Pass --metadata or set {METADATA_ENV}.")

    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f)

    if not isinstance(doc, dict):
        raise SystemExit(f"❌ {path} is not a metadata document (got {type(doc).__name__}).")
    return doc


def metadata_tables(doc: dict) -> list:
    tables = doc.get("tables")
    if tables is None:
        print("⚠️  No `tables` section in metadata; nothing to aggregate.", file=sys.stderr)
        return []
    if not isinstance(tables, list):
        raise SystemExit(f"❌ `tables` must be a list, got {type(tables).__name__}.")
    return tables


def ignored_sections(doc: dict) -> dict:
    # top-level list sections we read past, e.g. functions / remote_schemas
    return {
        key: len(value)
        for key, value in doc.items()
        if key != "tables" and isinstance(value, list) and value
    }
