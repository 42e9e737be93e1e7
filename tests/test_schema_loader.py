import json

import pytest

from eventify.core.errors import SchemaLoadError
from eventify.core.schema_loader import load_schema, parse_prisma_datamodel
from eventify.core.spec_schema import python_type_for

DATAMODEL = """
datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

model User {
    id          Int      @id @default(autoincrement())
    email       String   @unique
    phoneNumber String?  // optional
    createdAt   DateTime @default(now())
    orders      Order[]
}

enum Status {
    OPEN
    CLOSED
}

model Order {
    id         Int    @id @default(autoincrement())
    totalPrice Float
    userId     Int
    user       User   @relation(fields: [userId], references: [id])

    @@index([userId])
}
"""


def test_parse_prisma_models_in_order():
    schema = parse_prisma_datamodel(DATAMODEL)
    assert [m.name for m in schema.models] == ["User", "Order"]


def test_parse_prisma_fields_strip_modifiers():
    schema = parse_prisma_datamodel(DATAMODEL)
    user = schema.get_model("user")
    assert [(f.name, f.type) for f in user.fields] == [
        ("id", "Int"),
        ("email", "String"),
        ("phoneNumber", "String"),
        ("createdAt", "DateTime"),
        ("orders", "Order"),
    ]
    order_fields = [f.name for f in schema.get_model_fields("Order")]
    assert order_fields == ["id", "totalPrice", "userId", "user"]


def test_schema_lookups_are_case_insensitive():
    schema = parse_prisma_datamodel(DATAMODEL)
    assert schema.get_model_field("USER", "PHONENUMBER").name == "phoneNumber"
    assert schema.get_model("Nope") is None
    assert schema.get_model_fields("Nope") == []


def test_load_yaml_schema(tmp_path):
    p = tmp_path / "schema.yaml"
    p.write_text(
        "models:\n"
        "  - name: User\n"
        "    fields:\n"
        "      - {name: id, type: Int}\n"
        "      - {name: email, type: String}\n",
        encoding="utf-8",
    )
    schema = load_schema(p)
    assert schema.models[0].name == "User"
    assert [f.name for f in schema.models[0].fields] == ["id", "email"]


def test_load_json_and_prisma_files(tmp_path):
    j = tmp_path / "schema.json"
    j.write_text(json.dumps({"models": [{"name": "Tag"}]}), encoding="utf-8")
    assert load_schema(j).models[0].fields == []

    p = tmp_path / "schema.prisma"
    p.write_text(DATAMODEL, encoding="utf-8")
    assert len(load_schema(p).models) == 2


def test_load_schema_errors(tmp_path):
    with pytest.raises(SchemaLoadError):
        load_schema(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(SchemaLoadError):
        load_schema(bad)

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"models": [{"fields": []}]}), encoding="utf-8")
    with pytest.raises(SchemaLoadError):
        load_schema(invalid)


def test_python_type_lookup():
    assert python_type_for("Int") == "int"
    assert python_type_for("DateTime") == "datetime"
    assert python_type_for("Json") == "Any"
