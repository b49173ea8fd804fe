import pytest

from cartola.categories import (
    ALL_CATEGORIES,
    CATEGORY_RULES,
    allowed_categories_for,
)
from cartola.classifier import (
    CategoryClassifier,
    KeywordTemplate,
    detect_recurring_transaction,
    suggest_category,
)
from cartola.models import CategorySuggestion


@pytest.mark.parametrize(
    "description, tx_type, expected",
    [
        ("UNIMARC LAS CONDES", "cargo", ("Supermercado", "high")),
        ("netflix.com", "cargo", ("Streaming", "high")),
        ("PAYU UBER TRIP", "cargo", ("Transporte", "high")),
        ("UBER EATS SANTIAGO", "cargo", ("Delivery", "high")),
        ("FARMACIA CRUZ VERDE", "cargo", ("Salud", "high")),
        ("PAGO CGE", "cargo", ("Gastos Básicos", "high")),
        ("TRANSFERENCIA A JUAN PEREZ", "cargo", ("Otros", "low")),
        ("TRANSFERENCIA SUELDO", "abono", ("Sueldo", "high")),
        ("REMUNERACIONES MARZO", "abono", ("Sueldo", "high")),
        ("ABONO DESCONOCIDO", "abono", ("Otros", "low")),
        ("ZZZ", "cargo", ("Otros", "low")),
        ("", "cargo", ("Otros", "low")),
    ],
)
def test_suggest_category(description, tx_type, expected):
    assert suggest_category(description, tx_type) == CategorySuggestion(*expected)


def test_first_matching_rule_wins():
    # "CAFE" (Restaurant) is declared before "SPORT" (Deporte).
    assert suggest_category("CAFE SPORT CLUB", "cargo").category == "Restaurant"
    # The low-confidence transfer rule precedes the generic "PAGO" rule.
    assert suggest_category("TRANSF PAGO ARRIENDO", "cargo") == CategorySuggestion("Otros", "low")


def test_salary_fallback_only_for_income():
    rules = [r for r in CATEGORY_RULES if r.category != "Sueldo"]
    classifier = CategoryClassifier(rules=rules)

    assert classifier.suggest("SUELDO MARZO", "abono") == CategorySuggestion("Sueldo", "high")
    assert classifier.suggest("SUELDO MARZO", "cargo") == CategorySuggestion("Otros", "low")


def test_templates_run_before_rules_and_map_confidence():
    classifier = CategoryClassifier(
        templates=[
            KeywordTemplate(keywords=("unimarc",), category="Mercado Local", confidence="medium"),
            KeywordTemplate(keywords=("JUMBO",), category="Hogar"),
            KeywordTemplate(keywords=("BONO",), category="Bonos", tx_type="abono"),
        ]
    )

    assert classifier.suggest("UNIMARC", "cargo") == CategorySuggestion("Mercado Local", "low")
    assert classifier.suggest("jumbo costanera", "cargo") == CategorySuggestion("Hogar", "high")
    assert classifier.suggest("BONO ANUAL", "abono") == CategorySuggestion("Bonos", "high")
    assert classifier.suggest("BONO ANUAL", "cargo") == CategorySuggestion("Otros", "low")
    assert classifier.suggest("NETFLIX", "cargo") == CategorySuggestion("Streaming", "high")


def test_plain_callables_work_as_templates():
    def only_big_tickets(description, tx_type):
        return CategorySuggestion("Viajes", "high") if "LATAM" in description else None

    classifier = CategoryClassifier(templates=[only_big_tickets])
    assert classifier.suggest("latam.com", "cargo") == CategorySuggestion("Viajes", "high")


@pytest.mark.parametrize(
    "description, expected",
    [
        ("NETFLIX.COM", True),
        ("Suscripcion mensual club", True),
        ("SMARTFIT PROVIDENCIA", True),
        ("UNIMARC", False),
        ("", False),
    ],
)
def test_detect_recurring_transaction(description, expected):
    assert detect_recurring_transaction(description) is expected


def test_allowed_categories_by_direction():
    income = allowed_categories_for("abono")
    expense = allowed_categories_for("cargo")

    assert income == ("Sueldo", "Otros")
    assert "Sueldo" not in expense
    assert set(expense) | {"Sueldo"} == set(ALL_CATEGORIES)
    assert {r.category for r in CATEGORY_RULES} <= set(ALL_CATEGORIES)
