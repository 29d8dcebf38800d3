"""SKU codes for the Donare product families.

SKUs look like ``<product code>-<color code>-UN`` (``2002-10-UN``). Product
names are resolved against PRODUCT_CODES with a two-way substring test, so the
table order decides which family wins when names overlap. Rule for editing the
table: a more specific name always sits above any name it contains
(``PORTA JARRA REDONDO`` above ``PORTA JARRA``). ``ordering_violations()``
checks that rule and the tests keep it at zero.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

PRODUCT_CODES: List[Tuple[str, str]] = [
    # Porta Guardanapos
    ("PORTA GUARDANAPOS COURO", "1000"),
    ("PORTA GUARDANAPO INFINITO", "1001"),
    ("PORTA GUARDANAPO MICKEY VAZADO", "1005"),
    ("PORTA GUARDANAPO MICKEY", "1002"),
    ("PORTA GUARDANAPO LOVE VAZADO", "1006"),
    ("PORTA GUARDANAPO LOVE", "1003"),
    ("PORTA GUARDANAPO QUADRADO", "1004"),
    ("PORTA GUARDANAPO LIMAO SICILIANO", "1007"),
    ("PORTA GUARDANAPO POÁ VAZADO", "1008"),
    ("PORTA GUARDANAPO FLOR VAZADO", "1009"),

    # Porta Copos
    ("PORTA COPO COURO", "2000"),
    ("PORTA COPO ARABESCO", "2001"),
    ("PORTA COPO REDONDO", "2002"),
    ("PORTA COPO RETANGULAR", "2003"),
    ("PORTA COPO COSTELA DE ADAO", "2004"),
    ("PORTA COPO FOLHA DE PLÁTANO", "2005"),
    ("PORTA COPO PONTILLÉ", "2006"),
    ("PORTA COPO LOVE", "2007"),
    ("PORTA COPO ORGANICO", "2008"),
    ("PORTA COPO LIMAO SICILIANO", "2009"),
    ("PORTA COPO CIRCULO GREGO", "2010"),
    ("PORTA COPO MICKEY", "2011"),
    ("PORTA COPO BLOOM ROSÉ", "2012"),
    ("PORTA COPO TAVOLA DI FIORI", "2013"),

    # Jogos Americanos
    ("JOGO AMERICANO COURO", "3000"),
    ("LUGAR AMERICANO ARABESCO", "3001"),
    ("LUGAR AMERICANO REDONDO", "3002"),
    ("LUGAR AMERICANO RETANGULAR", "3003"),
    ("LUGAR AMERICANO COSTELA DE ADÃO", "3004"),
    ("LIUGAR AMERICANO FOLHA DE PLÁTANO", "3005"),
    ("LUGAR AMERICANO PONTILLÉ", "3006"),
    ("LUGAR AMERICANO LOVE", "3007"),
    ("LUGAR AMERICANO MICKEY", "3008"),
    ("LUGAR AMERICANO LIMAO SICILIANO", "3009"),
    ("LUGAR AMERICANO CIRCULO GREGO", "3010"),
    ("LUGAR AMERICANO ORGANICO", "3011"),

    # Porta Jarras
    ("PORTA JARRA REDONDO", "4001"),
    ("PORTA JARRA ARABESCO", "4002"),
    ("PORTA JARRA RETANGULAR", "4003"),
    ("PORTA JARRA LOVE", "4004"),
    ("PORTA JARRA COSTELA DE ADÃO", "4005"),
    ("PORTA JARRA FOLHA DE PLÁTANO", "4006"),
    ("PORTA JARRA PONTILLÉ", "4007"),
    ("PORTA JARRA MICKEY", "4008"),
    ("PORTA JARRA LIMAO SICILIANO", "4009"),
    ("PORTA JARRA CIRCULO BREGO", "4010"),
    ("PORTA JARRA ORGANICO", "4011"),
    ("PORTA JARRA", "4000"),

    # Marcadores de Taça
    ("MARCADOR DE TACA LOVE", "5001"),
    ("MARCADOR DE TAÇA COSTELA DE ADÃO", "5002"),
    ("MARCADOR DE TAÇA FOLHA DE PLÁTANO", "5003"),
    ("MARCADOR DE TAÇA MICKEY", "5004"),
    ("MARCADOR DE TAÇA LAÇO", "5005"),
    ("MARCADOR DE TAÇA", "5000"),

    # Guardanapos
    ("GUARDANAPO GABARDINE PONTO AJOUR", "6001"),

    # Porta Guardanapos Acrílico
    ("PORTA GUARDANAPO ACRÍLICO", "7000"),
    ("PORTA GUARDANAPO ACRILICO LOVE", "7001"),
    ("PORTA GUARDANAPO ACRILICO MICKEY", "7002"),
    ("PORTA GUARDANAPO ACRILICO QUADRADO", "7003"),
    ("PORTA GUARDANAPO ACRILICO REDONDO", "7004"),
    ("PORTA GUARDANAPO ACRILICO CRUZ", "7005"),
    ("PORTA GUARDANAPO ACRILICO ARVORE NATALINA", "7006"),
    ("PORTA GUARDANAPO ACRILICO ORELHA DE COELHO", "7007"),
    ("PORTA GUARDANAPO ACRILICO COELHO", "7008"),
]

COLOR_CODES: Dict[str, str] = {
    "VERMELHO": "10",
    "CACAU": "20",
    "PALHA": "30",
    "BLACK": "40",
    "OFF WHITE": "50",
    "VERDE MILITAR": "60",
    "AZUL MARINHO": "70",
    "ROSA": "80",
    "ROSA BEBÊ": "90",
    "NUDE": "100",
    "AZUL ROYAL": "110",
    "CASTANHO": "120",
    "CHUMBO": "130",
    "AZUL BEBÊ": "140",
    "LARANJA": "150",
    "LEMON": "160",
}

SKU_SUFFIX = "UN"


def _normalize(name: str | None) -> str:
    return (name or "").upper().strip()


def product_code(product_name: str | None) -> str:
    name = _normalize(product_name)
    if not name:
        return ""
    # an exact name always resolves to its own row
    for fragment, code in PRODUCT_CODES:
        if name == fragment:
            return code
    for fragment, code in PRODUCT_CODES:
        if fragment in name or name in fragment:
            return code
    return ""


def product_exists(product_name: str | None) -> bool:
    return product_code(product_name) != ""


def color_code(color_name: str | None) -> str:
    return COLOR_CODES.get(_normalize(color_name), "")


def generate_sku(product_name: str | None, color_name: str | None) -> str:
    """Returns "" when either code is unknown; callers read that as "SKU not determinable yet"."""
    p = product_code(product_name)
    c = color_code(color_name)
    if p and c:
        return f"{p}-{c}-{SKU_SUFFIX}"
    return ""


def ordering_violations() -> List[Tuple[str, str]]:
    """(general, specific) pairs where the general name sits above a name that contains it."""
    out: List[Tuple[str, str]] = []
    for i, (general, _) in enumerate(PRODUCT_CODES):
        for specific, _ in PRODUCT_CODES[i + 1:]:
            if general in specific:
                out.append((general, specific))
    return out
