#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Flatten the per-role view into role_permission_matrix.csv:
  role | table | operation | columns | filter | check
One row per (role, table, operation) that is actually granted.
"""

import argparse
import json
import sys

import pandas as pd

from hasura_metadata import load_metadata, metadata_tables, resolve_metadata_path
from role_permissions import OPERATIONS, aggregate, filter_roles, permission_key

MATRIX_COLUMNS = ["role", "table", "operation", "columns", "filter", "check"]
CSV_OUTPUT     = "role_permission_matrix.csv"


def compact(value) -> str:
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def column_list(columns) -> str:
    if columns is None:
        return ""
    if isinstance(columns, str):  # "*" = every column
        return columns
    return ",".join(str(c) for c in columns)


def permission_rows(perms: list) -> list:
    rows = []
    for rp in perms:
        for op in OPERATIONS:
            for table, permission in rp[permission_key(op)].items():
                row = {"role": rp["role"], "table": table, "operation": op}
                if isinstance(permission, dict):
                    row["columns"] = column_list(permission.get("columns"))
                    row["filter"]  = compact(permission.get("filter"))
                    row["check"]   = compact(permission.get("check"))
                else:
                    row.update(columns="", filter=compact(permission), check="")
                rows.append(row)
    return rows


def permission_matrix(perms: list) -> pd.DataFrame:
    return pd.DataFrame(permission_rows(perms), columns=MATRIX_COLUMNS)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Write Hasura role permissions as a flat CSV.")
    ap.add_argument("--metadata", default=None)
    ap.add_argument("--role", action="append", dest="roles", default=None)
    ap.add_argument("--out", default=CSV_OUTPUT)
    args = ap.parse_args(argv)

    # Step 1: per-role view
    doc = load_metadata(resolve_metadata_path(args.metadata))
    perms = filter_roles(aggregate(metadata_tables(doc)), args.roles)

    # Step 2: flatten
    df_out = permission_matrix(perms)

    # Step 3: save
    df_out.to_csv(args.out, index=False)
    print(f"✅ Saved: {args.out} ({len(df_out)} rows)", file=sys.stderr)


if __name__ == "__main__":
    main()
