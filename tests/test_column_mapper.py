import pytest

from cartola.column_mapper import infer_column_mapping, map_structure_to_transactions
from cartola.keywords import FieldKeywordRegistry
from cartola.models import ColumnMapping, FileStructure, TransactionDraft, is_mapping_valid


def _structure(headers, rows):
    return FileStructure(headers=tuple(headers), rows=tuple(tuple(r) for r in rows))


def test_spanish_headers_are_auto_detected():
    structure = _structure(
        ["Fecha", "Descripción", "Monto"],
        [["15/03/2024", "UNIMARC LAS CONDES", -5990], ["16/03/2024", "Sueldo", 1500000]],
    )

    result = infer_column_mapping(structure)

    assert result.mapping == ColumnMapping(
        date="Fecha", description="Descripción", amount="Monto", date_format="DD/MM/YYYY"
    )
    assert result.is_auto_detected is True
    assert result.confidence == pytest.approx(1.0)
    assert is_mapping_valid(result.mapping)


def test_cargo_abono_columns_replace_amount():
    structure = _structure(
        ["Fecha", "Descripcion", "Cargo", "Abono"],
        [["01/03/2024", "NETFLIX", 5990, ""]],
    )

    mapping = infer_column_mapping(structure).mapping

    assert mapping.amount is None
    assert (mapping.cargo, mapping.abono) == ("Cargo", "Abono")
    assert mapping.is_valid


def test_unrecognized_headers_need_confirmation():
    structure = _structure(["Col A", "Col B", "Col C"], [["x", "y", "z"]])

    result = infer_column_mapping(structure)

    assert result.is_auto_detected is False
    assert result.confidence == 0.0
    assert not result.mapping.is_valid


def test_partial_matches_are_not_auto_detected():
    structure = _structure(
        ["Fecha Contable", "Glosa Movimiento", "Monto"], [["15/03/2024", "LIDER", -100]]
    )

    result = infer_column_mapping(structure)

    assert result.mapping.date == "Fecha Contable"
    assert result.mapping.description == "Glosa Movimiento"
    assert result.confidence == pytest.approx((0.7 + 0.7 + 1.0) / 3)
    assert result.is_auto_detected is True

    weaker = _structure(["Valor cuota", "Detalle", "Monto"], [["15/03/2024", "LIDER", -100]])
    assert infer_column_mapping(weaker).is_auto_detected is False


def test_custom_registry_keywords_are_used():
    registry = FieldKeywordRegistry.default()
    registry.add_custom_keywords("date", ["F. Contable"])
    structure = _structure(["F. Contable", "Detalle", "Monto"], [["15/03/2024", "LIDER", -100]])

    assert infer_column_mapping(structure).mapping.date is None
    assert infer_column_mapping(structure, registry).mapping.date == "F. Contable"


def test_map_signed_amount_column():
    structure = _structure(
        ["Fecha", "Descripción", "Monto"],
        [
            ["15/03/2024", "  unimarc   las condes ", -5990],
            ["16/03/2024", "Sueldo", "1.500.000"],
            ["17/03/2024", "Ajuste", 0],
            ["18/03/2024", "", -100],
        ],
    )
    mapping = ColumnMapping(date="Fecha", description="Descripción", amount="Monto")

    drafts = map_structure_to_transactions(structure, mapping)

    assert drafts == [
        TransactionDraft(
            date="15/03/2024", description="UNIMARC LAS CONDES", amount=5990.0, type="cargo"
        ),
        TransactionDraft(date="16/03/2024", description="SUELDO", amount=1500000.0, type="abono"),
    ]


def test_map_cargo_abono_with_date_carry_forward():
    structure = _structure(
        ["Fecha", "Descripcion", "Cargo", "Abono"],
        [
            ["01/03/2024", "NETFLIX", 5990, ""],
            ["", "SUELDO MARZO", "", 1500000],
            ["", "AMBOS", 100, 200],
            ["02/03/2024", "NADA", "", ""],
        ],
    )
    mapping = ColumnMapping(
        date="Fecha", description="Descripcion", cargo="Cargo", abono="Abono", date_format="DD/MM/YYYY"
    )

    drafts = map_structure_to_transactions(structure, mapping)

    assert [(d.date, d.description, d.amount, d.type) for d in drafts] == [
        ("01/03/2024", "NETFLIX", 5990.0, "cargo"),
        ("01/03/2024", "SUELDO MARZO", 1500000.0, "abono"),
        ("01/03/2024", "AMBOS", 100.0, "cargo"),
    ]


def test_single_cargo_column_requires_positive_value():
    structure = _structure(
        ["Fecha", "Detalle", "Cargo"],
        [["01/03/2024", "A", 10], ["01/03/2024", "B", -10], ["01/03/2024", "C", ""]],
    )
    mapping = ColumnMapping(date="Fecha", description="Detalle", cargo="Cargo")

    drafts = map_structure_to_transactions(structure, mapping)

    assert [(d.description, d.type) for d in drafts] == [("A", "cargo")]


def test_missing_required_columns_yield_no_drafts():
    structure = _structure(["Fecha", "Monto"], [["01/03/2024", 10]])
    assert map_structure_to_transactions(structure, ColumnMapping(date="Fecha", amount="Monto")) == []
    assert (
        map_structure_to_transactions(
            structure, ColumnMapping(date="Fecha", description="Glosa", amount="Monto")
        )
        == []
    )


def test_assign_keeps_amount_families_exclusive():
    mapping = ColumnMapping(date="Fecha", description="Glosa", amount="Monto")

    split = mapping.assign("cargo", "Cargo")
    assert (split.amount, split.cargo) == (None, "Cargo")

    signed = split.assign("abono", "Abono").assign("amount", "Monto")
    assert (signed.amount, signed.cargo, signed.abono) == ("Monto", None, None)

    with pytest.raises(ValueError):
        mapping.assign("category", "X")


def test_map_text_cargo_with_thousands_separator():
    structure = _structure(
        ["Fecha", "Descripcion", "Cargo", "Abono"],
        [["05/03/2024", "arriendo depto", "10.000", ""]],
    )
    mapping = ColumnMapping(date="Fecha", description="Descripcion", cargo="Cargo", abono="Abono")

    drafts = map_structure_to_transactions(structure, mapping)

    assert drafts == [
        TransactionDraft(
            date="05/03/2024", description="ARRIENDO DEPTO", amount=10000.0, type="cargo"
        )
    ]


def test_date_format_samples_non_empty_cells_past_leading_blanks():
    undated = [["", f"MOVIMIENTO {i}", -100] for i in range(21)]
    dated = [["03/15/24", "LIDER", -100], ["03/16/24", "JUMBO", -200]]
    structure = _structure(["Fecha", "Descripción", "Monto"], undated + dated)

    assert infer_column_mapping(structure).mapping.date_format == "MM/DD/YY"
