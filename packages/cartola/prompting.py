"""Prompt construction for batched AI categorization.

This module builds:
- A deterministic JSON serialization of the batch items, one object per
  low-confidence transaction with a fixed field order.
- The system and user prompts (Spanish, matching the statements being
  classified).
- The ``response_format`` object for the chat-completions endpoint.

The items JSON is embedded between ``BEGIN_TRANSACTIONS_JSON`` and
``END_TRANSACTIONS_JSON`` marker lines so tests and stubs can recover it.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from .categories import ALL_CATEGORIES, allowed_categories_for
from .models import TransactionType

ITEM_FIELD_ORDER: tuple[str, ...] = ("index", "description", "direction", "allowed_categories")

BEGIN_MARKER = "BEGIN_TRANSACTIONS_JSON"
END_MARKER = "END_TRANSACTIONS_JSON"

_DIRECTION_LABELS: dict[str, str] = {
    "abono": "Ingreso (Abono)",
    "cargo": "Gasto (Cargo)",
}

CATEGORY_EXAMPLES_EXPENSES = """Ejemplos específicos de transacciones bancarias chilenas:

SUPERMERCADO: UNIMARC, FOOD MARKET, PRONTO COPEC, ISIDORA.COPEC, TUU MARKET, ALMACEN, LIDER, JUMBO, TOTTUS, SANTA ISABEL
TRANSPORTE: PAYU UBER TRIP, PAYU *UBER, RECORRIDO, LATAM.COM, TUU TRANSPORTES, COPEC (combustible), SKY AIRLINE
DELIVERY: PAYU UBER EATS, RAPPI, PEDIDOSYA, CORNERSHOP
RESTAURANT: NIU SUSHI, DELI A VARAS, CERVECERIA, RATIO COFFEE, CAFETERIA, UDON, STARBUCKS, JUAN VALDEZ
STREAMING: MUBI, GOOGLE YOUTUBE, NEXTORY, NETFLIX, SPOTIFY, HBO MAX, AMAZON PRIME, CRUNCHYROLL
TRABAJO: FIGMA, DIGITALOCEAN, CLAUDE.AI, OBSIDIAN, GITHUB, NOTION, AWS, GOOGLE CLOUD
GASTOS BÁSICOS: PAGO CGE, PAGO WOM, WOMPAY, luz, agua, gas, internet, teléfono
JUEGOS: PLAYSTATION NETWORK, PSN, STEAM, NINTENDO, XBOX, DISCORD, EPIC GAMES, compras y suscripciones de videojuegos
CINE: CINEPLANET, CINES MOVILAND, CINEMARK, CINEPOLIS
SALUD: SALCOBRAND, CRUZ VERDE, C. VERDE, AHUMADA, farmacias
LIBROS: DIGITAL PUBLICATION, KINDLE, BUSCALIBRE, ANTARTICA
DECORACIÓN: CASAIDEAS, IKEA, HOMY, SODIMAC (decoración), muebles
VESTIMENTA: RIPLEY, FALABELLA, ZARA, H&M, PARIS, ropa
INVERSIONES: BINANCE.COM, BUDA, crypto, acciones
DEPORTE: club de esgrima, gimnasio, GYM, SMARTFIT
ARRIENDO: AIRBNB, transferencias de arriendo
ESTÉTICA: peluquería, barbería, spa, manicure
LAVANDERÍA: lavandería, tintorería
CONCIERTOS: PUNTOTICKET, TICKETMASTER, eventos en vivo

CASOS AMBIGUOS → "Otros":
- APPLE.COM BILL
- MERCADOPAGO sin contexto
- Transferencias a personas sin contexto"""

CATEGORY_EXAMPLES_INCOME = (
    "Ejemplos para ingresos:\n"
    '- "Remuneraciones" → "Sueldo"\n'
    '- Cualquier otro ingreso → "Otros"'
)


def build_batch_items(
    items: Sequence[tuple[str, TransactionType]],
) -> list[dict[str, Any]]:
    """Return prompt items for ``(description, direction)`` pairs, indexed from 0."""

    out: list[dict[str, Any]] = []
    for index, (description, tx_type) in enumerate(items):
        out.append(
            {
                "index": index,
                "description": description,
                "direction": _DIRECTION_LABELS[tx_type],
                "allowed_categories": list(allowed_categories_for(tx_type)),
            }
        )
    return out


def serialize_items_to_json(items: Sequence[dict[str, Any]]) -> str:
    """Serialize batch items to a JSON array with :data:`ITEM_FIELD_ORDER` per object."""

    arr = [{key: item.get(key) for key in ITEM_FIELD_ORDER} for item in items]
    return json.dumps(arr, ensure_ascii=False)


def build_system_instructions() -> str:
    return (
        "Eres un asistente especializado en categorización de transacciones bancarias "
        "chilenas. Siempre respondes con JSON válido y estructurado."
    )


def build_user_content(items_json: str, *, num_items: int) -> str:
    """Build the user message for a batch of ``num_items`` transactions.

    Carries the category examples, the full category list, the per-item
    allowed subsets (inside the embedded JSON) and the required response
    shape ``{"categories": [{"index": int, "category": str}, ...]}``.
    """

    category_lines = "\n".join(f"  {i}. {c}" for i, c in enumerate(ALL_CATEGORIES, start=1))
    return (
        f"Necesito que categorices {num_items} transacciones bancarias.\n\n"
        f"{CATEGORY_EXAMPLES_EXPENSES}\n\n"
        f"{CATEGORY_EXAMPLES_INCOME}\n\n"
        "Categorías válidas:\n"
        f"{category_lines}\n\n"
        "INSTRUCCIONES:\n"
        "1. Analiza cada descripción palabra por palabra y busca coincidencias parciales "
        '(ej: "PLAYSTATION" dentro de "PLAYSTATION NETWORK SAN MAT").\n'
        "2. Para cada transacción usa EXACTAMENTE una de sus allowed_categories.\n"
        '3. Usa "Otros" solo como último recurso.\n'
        '4. Para ingresos (Abono), prioriza "Sueldo" y usa "Otros" si no es un sueldo.\n\n'
        "Transacciones a categorizar (index es la posición 0-based):\n"
        f"{BEGIN_MARKER}\n{items_json}\n{END_MARKER}\n\n"
        "Responde ÚNICAMENTE con un objeto JSON con esta estructura exacta:\n"
        '{"categories": [{"index": 0, "category": "nombre_exacto_de_la_categoria"}]}'
    )


def build_response_format() -> dict[str, str]:
    return {"type": "json_object"}


__all__ = [
    "ITEM_FIELD_ORDER",
    "BEGIN_MARKER",
    "END_MARKER",
    "build_batch_items",
    "serialize_items_to_json",
    "build_system_instructions",
    "build_user_content",
    "build_response_format",
]
