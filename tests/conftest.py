import pytest
import yaml


def table(schema, name, **permissions):
    tbl = {"table": {"schema": schema, "name": name}}
    tbl.update(permissions)
    return tbl


def grant(role, columns=None, filter=None, check=None):
    return {"role": role, "permission": {"columns": columns or [], "filter": filter or {}, "check": check}}


@pytest.fixture
def metadata_doc():
    return {
        "version": 2,
        "tables": [
            table(
                "public", "users",
                select_permissions=[grant("user", ["id", "name"], {"id": {"_eq": "X-Hasura-User-Id"}}),
                                    grant("admin", ["id", "name", "email"])],
                update_permissions=[grant("user", ["name"], {"id": {"_eq": "X-Hasura-User-Id"}})],
            ),
            table(
                "public", "orders",
                insert_permissions=[grant("admin", ["total"], check={"total": {"_gt": 0}})],
                delete_permissions=[grant("auditor", filter={"archived": {"_eq": True}})],
            ),
        ],
        "functions": [{"function": {"schema": "public", "name": "search_users"}}],
        "remote_schemas": [],
    }


@pytest.fixture
def metadata_file(tmp_path, metadata_doc):
    path = tmp_path / "metadata.yaml"
    path.write_text(yaml.safe_dump(metadata_doc, sort_keys=False), encoding="utf-8")
    return path
