#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Invert Hasura table permissions into a per-role view.

Input : metadata.yaml   (tables → select/insert/update/delete permissions per role)
Output: JSON (or YAML) list, one entry per role, in first-seen order
         role | select_permissions | insert_permissions | update_permissions | delete_permissions
         each *_permissions maps "<schema>.<table>" → the permission exactly as written
"""

import argparse
import copy
import json
import sys

import yaml

from hasura_metadata import (
    ignored_sections,
    load_metadata,
    metadata_tables,
    resolve_metadata_path,
)

# fixed scan order; also the output key order
OPERATIONS     = ("select", "insert", "update", "delete")
DEFAULT_SCHEMA = "public"
FORMATS        = ("json", "yaml")


def permission_key(op: str) -> str:
    return f"{op}_permissions"


def table_name(tbl: dict) -> str:
    table = tbl["table"]
    # old-style metadata: `table: users` means public.users
    if isinstance(table, str):
        return f"{DEFAULT_SCHEMA}.{table}"
    return f"{table['schema']}.{table['name']}"


def new_role_permission(role: str) -> dict:
    rp = {"role": role}
    for op in OPERATIONS:
        rp[permission_key(op)] = {}
    return rp


def aggregate(tables) -> list:
    """
    Fold table permission declarations into one entry per role.

    Roles come out in the order they are first seen (tables in order, then
    select/insert/update/delete, then list order). A repeated
    (role, table, operation) keeps the last permission.
    """
    perms = []
    by_role = {}

    for tbl in tables:
        name = table_name(tbl)
        for op in OPERATIONS:
            key = permission_key(op)
            for grant in tbl.get(key) or []:
                role = grant["role"]
                rp = by_role.get(role)
                if rp is None:
                    rp = new_role_permission(role)
                    by_role[role] = rp
                    perms.append(rp)
                rp[key][name] = copy.deepcopy(grant.get("permission"))

    return perms


def filter_roles(perms: list, roles=None) -> list:
    if not roles:
        return perms
    wanted = set(roles)
    return [rp for rp in perms if rp["role"] in wanted]


def render(perms: list, fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(perms, sort_keys=False, allow_unicode=True, default_flow_style=False)
    if fmt == "json":
        # default=str covers YAML-only scalars such as dates
        return json.dumps(perms, indent=2, ensure_ascii=False, default=str) + "\n"
    raise ValueError(f"unknown output format: {fmt}")


# ───────────────────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List Hasura permissions per role instead of per table.")
    ap.add_argument("--metadata", default=None,
                    help="Path to metadata.yaml (default: $HASURA_METADATA or metadata.yaml beside this script)")
    ap.add_argument("--role", action="append", dest="roles", default=None,
                    help="Only print this role; repeat for several.")
    ap.add_argument("--format", choices=FORMATS, default="json")
    ap.add_argument("--out", default=None, help="Write here instead of stdout.")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)

    doc = load_metadata(resolve_metadata_path(args.metadata))
    tables = metadata_tables(doc)
    perms = filter_roles(aggregate(tables), args.roles)
    text = render(perms, args.format)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"✅ Wrote {args.out}", file=sys.stderr)
    else:
        sys.stdout.write(text)

    print(f"ℹ️ {len(tables)} tables → {len(perms)} roles", file=sys.stderr)
    skipped = ignored_sections(doc)
    if skipped:
        listed = ", ".join(f"{k} ({n})" for k, n in skipped.items())
        print(f"ℹ️ Not aggregated: {listed}", file=sys.stderr)


if __name__ == "__main__":
    main()
