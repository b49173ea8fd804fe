import pytest

from cartola.keywords import FieldKeywordRegistry
from cartola.text import collapse_whitespace, normalize_string


def test_normalize_string_folds_case_accents_and_whitespace():
    assert normalize_string("  Descripción ") == "descripcion"
    assert normalize_string("DESCRIPCION") == "descripcion"
    assert normalize_string("Lavandería") == "lavanderia"
    assert collapse_whitespace("  uber \t  trip\n") == "uber trip"


@pytest.mark.parametrize(
    "field, column, expected",
    [
        ("date", "Fecha", 1.0),
        ("date", "FECHA DE OPERACIÓN", 1.0),
        ("description", "Descripción", 1.0),
        ("date", "Fecha Contable", 0.7),
        ("amount", "Monto Total CLP", 0.7),
        ("date", "Valor cuota", 0.5),
        ("date", "Glosa", 0.0),
        ("date", "", 0.0),
        ("unknown-field", "Fecha", 0.0),
    ],
)
def test_match_column_scores(field, column, expected):
    assert FieldKeywordRegistry.default().match_column(field, column) == expected


def test_get_best_match_prefers_highest_score_then_first_column():
    registry = FieldKeywordRegistry.default()

    match = registry.get_best_match("description", ["Fecha", "Detalle", "Descripción"])
    assert match is not None
    assert match.column_name == "Detalle"
    assert match.score == 1.0

    match = registry.get_best_match("date", ["Valor cuota", "Fecha Contable"])
    assert match is not None
    assert (match.column_name, match.score) == ("Fecha Contable", 0.7)

    assert registry.get_best_match("date", ["Glosa", "Monto"]) is None


def test_add_custom_keywords_is_append_only_and_per_instance():
    registry = FieldKeywordRegistry.default()
    before = registry.keywords_for("date")

    registry.add_custom_keywords("date", ["F. Contable", "   "])

    after = registry.keywords_for("date")
    assert after[: len(before)] == before
    assert after[len(before) :] == ("F. Contable",)
    assert registry.match_column("date", "f. contable") == 1.0
    assert FieldKeywordRegistry.default().match_column("date", "F. Contable") == 0.0


def test_add_custom_keywords_creates_new_field():
    registry = FieldKeywordRegistry.default()
    registry.add_custom_keywords("category", ["rubro"])
    assert registry.match_column("category", "Rubro") == 1.0
