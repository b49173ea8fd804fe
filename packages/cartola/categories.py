"""Category names and the keyword rule table used by the classifier.

Rules are evaluated in order and the first keyword contained in the
upper-cased description wins, so ordering matters: ``"PAGO"`` (Gastos
Básicos) must come after the more specific transfer and delivery rules, and
the low-confidence transfer bucket sits before it on purpose so
``"TRANSFERENCIA ... PAGO"`` is not mistaken for a utility bill.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Confidence, TransactionType


@dataclass(frozen=True, slots=True)
class CategoryRule:
    keywords: tuple[str, ...]
    category: str
    confidence: Confidence


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        keywords=(
            "SUPERMERCADO",
            "UNIMARC",
            "LIDER",
            "JUMBO",
            "SANTA ISABEL",
            "TOTTUS",
            "FOOD MARKET",
            "PRONTO COPEC",
            "ISIDORA.COPEC",
            "TUU MARKET",
            "ALMACEN",
        ),
        category="Supermercado",
        confidence="high",
    ),
    CategoryRule(
        keywords=("DELIVERY", "RAPPI", "UBER EATS", "PEDIDOS YA"),
        category="Delivery",
        confidence="high",
    ),
    CategoryRule(
        keywords=("UBER TRIP", "TAXI", "TRANSPORTE", "METRO", "BUS", "RECORRIDO"),
        category="Transporte",
        confidence="high",
    ),
    CategoryRule(
        keywords=(
            "RESTAURANT",
            "RESTORAN",
            "CAFE",
            "SUSHI",
            "PIZZA",
            "MCDONALDS",
            "BURGER",
            "NIU SUSHI",
            "DELI A VARAS",
            "CERVECERA",
            "CERVECERIA",
            "RATIO COFFEE",
            "WONDERLAND CAFE",
            "CAFETERIA",
            "UDON",
            "STARBUCKS",
        ),
        category="Restaurant",
        confidence="high",
    ),
    CategoryRule(
        keywords=("AIRBNB", "HOTEL", "HOSPEDAJE", "MIGUEL ARTURO", "BRAVO GI SPA"),
        category="Arriendo",
        confidence="high",
    ),
    CategoryRule(
        keywords=("SUELDO", "REMUNERACIONES", "TRANSFERENCIA SUELDO"),
        category="Sueldo",
        confidence="high",
    ),
    CategoryRule(
        keywords=(
            "CLAUDE",
            "OPENAI",
            "GITHUB",
            "NOTION",
            "OBSIDIAN",
            "FIGMA",
            "DIGITALOCEAN",
            "AWS",
            "GOOGLE CLOUD",
        ),
        category="Trabajo",
        confidence="high",
    ),
    CategoryRule(keywords=("CINE", "MOVILAND", "HOYTS"), category="Cine", confidence="high"),
    CategoryRule(
        keywords=("FARMACIA", "FARMA", "CRUZ VERDE", "SALCOBRAND"),
        category="Salud",
        confidence="high",
    ),
    CategoryRule(
        keywords=("GYM", "GIMNASIO", "SPORT", "DEPORTE", "FUTBOL", "TENIS", "ESGRIMA"),
        category="Deporte",
        confidence="high",
    ),
    CategoryRule(
        keywords=("LAVANDERIA", "LAVANDERÍA", "DRY CLEAN"),
        category="Lavandería",
        confidence="high",
    ),
    CategoryRule(
        keywords=("TRANSFERENCIA", "TRANSF", "MERCADO PAGO"),
        category="Otros",
        confidence="low",
    ),
    CategoryRule(
        keywords=("PAGO", "PAGO CGE", "PAGO WOM", "CUENTA", "SERVICIO", "WOMPAY"),
        category="Gastos Básicos",
        confidence="high",
    ),
    CategoryRule(
        keywords=(
            "MUBI",
            "GOOGLE YOUTUBE",
            "DL GOOGLE YOUTUBE",
            "GOOGLE PLAY YOUTUBE",
            "NEXTORY",
            "NETFLIX",
            "SPOTIFY",
            "HBO MAX",
            "AMAZON PRIME",
            "CRUNCHYROLL",
            "DRUMSCRIBE",
        ),
        category="Streaming",
        confidence="high",
    ),
    CategoryRule(
        keywords=("DIGITAL PUBLICATION", "KINDLE", "BUSCALIBRE", "ANTARTICA"),
        category="Libros",
        confidence="high",
    ),
    CategoryRule(
        keywords=(
            "PLAYSTATION",
            "PLAY STATION",
            "PSN",
            "PS4",
            "PS5",
            "STEAM",
            "NINTENDO",
            "SWITCH",
            "XBOX",
            "DISCORD",
            "EPIC GAMES",
            "EPICGAMES",
            "JUEGOS",
            "GAME",
            "GAMING",
        ),
        category="Juegos",
        confidence="high",
    ),
    CategoryRule(keywords=("AHORRO",), category="Ahorro", confidence="high"),
)

RECURRING_KEYWORDS: tuple[str, ...] = (
    # Streaming and media
    "NETFLIX",
    "SPOTIFY",
    "AMAZON PRIME",
    "HBO MAX",
    "DISNEY",
    "YOUTUBE",
    "GOOGLE YOUTUBE",
    "GOOGLE PLAY",
    "APPLE.COM BILL",
    "MUBI",
    "CRUNCHYROLL",
    "NEXTORY",
    "DRUMSCRIBE",
    # Work tooling
    "FIGMA",
    "NOTION",
    "GITHUB",
    "DIGITALOCEAN",
    "AWS",
    "GOOGLE CLOUD",
    # Utilities
    "PAGO CGE",
    "PAGO WOM",
    "WOMPAY",
    # Housing
    "ARRIENDO",
    "AIRBNB",
    # Memberships
    "CLUB ESCRIMA",
    "GYM",
    "GIMNASIO",
    "SMARTFIT",
    # Generic markers
    "SUBSCRIPTION",
    "SUSCRIPCION",
    "MENSUAL",
    "RECURRENTE",
    "RENOVACION",
)

FALLBACK_CATEGORY = "Otros"

INCOME_CATEGORIES: tuple[str, ...] = ("Sueldo",)

ALL_CATEGORIES: tuple[str, ...] = (
    "Supermercado",
    "Delivery",
    "Transporte",
    "Restaurant",
    "Arriendo",
    "Sueldo",
    "Trabajo",
    "Cine",
    "Salud",
    "Deporte",
    "Lavandería",
    "Gastos Básicos",
    "Streaming",
    "Libros",
    "Juegos",
    "Ahorro",
    "Decoración",
    "Vestimenta",
    "Inversiones",
    "Estética",
    "Conciertos",
    FALLBACK_CATEGORY,
)


def allowed_categories_for(tx_type: TransactionType) -> tuple[str, ...]:
    """Categories an item of direction ``tx_type`` may be assigned.

    Income (``abono``) gets the income-only categories plus ``Otros``;
    expenses (``cargo``) get everything except the income-only categories.
    """

    if tx_type == "abono":
        return tuple(
            c for c in ALL_CATEGORIES if c in INCOME_CATEGORIES or c == FALLBACK_CATEGORY
        )
    return tuple(c for c in ALL_CATEGORIES if c not in INCOME_CATEGORIES)


__all__ = [
    "CategoryRule",
    "CATEGORY_RULES",
    "RECURRING_KEYWORDS",
    "FALLBACK_CATEGORY",
    "INCOME_CATEGORIES",
    "ALL_CATEGORIES",
    "allowed_categories_for",
]
