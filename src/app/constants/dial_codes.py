"""Tabela de códigos de discagem internacional (DDI) → país.

Dado de configuração, não lógica: para cobrir um país novo basta incluir
uma linha. A busca é por maior prefixo (ex.: "+77..." casa "77"
Cazaquistão antes de "7" Rússia), então prefixos mais específicos podem
conviver com os genéricos.

Formato: prefixo (só dígitos, sem "+") → (ISO 3166-1 alpha-2, nome).
"""

from __future__ import annotations

from types import MappingProxyType

DIAL_CODES = MappingProxyType({
    # Zona 1 (NANP): EUA e Canadá compartilham o prefixo
    "1": ("US", "Estados Unidos/Canadá"),
    # Zona 2
    "20": ("EG", "Egito"),
    "212": ("MA", "Marrocos"),
    "213": ("DZ", "Argélia"),
    "216": ("TN", "Tunísia"),
    "234": ("NG", "Nigéria"),
    "244": ("AO", "Angola"),
    "254": ("KE", "Quênia"),
    "258": ("MZ", "Moçambique"),
    "27": ("ZA", "África do Sul"),
    # Zonas 3 e 4: Europa
    "30": ("GR", "Grécia"),
    "31": ("NL", "Países Baixos"),
    "32": ("BE", "Bélgica"),
    "33": ("FR", "França"),
    "34": ("ES", "Espanha"),
    "351": ("PT", "Portugal"),
    "353": ("IE", "Irlanda"),
    "358": ("FI", "Finlândia"),
    "359": ("BG", "Bulgária"),
    "36": ("HU", "Hungria"),
    "370": ("LT", "Lituânia"),
    "371": ("LV", "Letônia"),
    "372": ("EE", "Estônia"),
    "373": ("MD", "Moldávia"),
    "374": ("AM", "Armênia"),
    "375": ("BY", "Bielorrússia"),
    "380": ("UA", "Ucrânia"),
    "381": ("RS", "Sérvia"),
    "385": ("HR", "Croácia"),
    "39": ("IT", "Itália"),
    "40": ("RO", "Romênia"),
    "41": ("CH", "Suíça"),
    "420": ("CZ", "Tchéquia"),
    "421": ("SK", "Eslováquia"),
    "43": ("AT", "Áustria"),
    "44": ("GB", "Reino Unido"),
    "45": ("DK", "Dinamarca"),
    "46": ("SE", "Suécia"),
    "47": ("NO", "Noruega"),
    "48": ("PL", "Polônia"),
    "49": ("DE", "Alemanha"),
    # Zona 5: Américas Central e do Sul
    "51": ("PE", "Peru"),
    "52": ("MX", "México"),
    "53": ("CU", "Cuba"),
    "54": ("AR", "Argentina"),
    "55": ("BR", "Brasil"),
    "56": ("CL", "Chile"),
    "57": ("CO", "Colômbia"),
    "58": ("VE", "Venezuela"),
    "591": ("BO", "Bolívia"),
    "593": ("EC", "Equador"),
    "595": ("PY", "Paraguai"),
    "598": ("UY", "Uruguai"),
    # Zona 6: Sudeste Asiático e Oceania
    "60": ("MY", "Malásia"),
    "61": ("AU", "Austrália"),
    "62": ("ID", "Indonésia"),
    "63": ("PH", "Filipinas"),
    "64": ("NZ", "Nova Zelândia"),
    "65": ("SG", "Singapura"),
    "66": ("TH", "Tailândia"),
    # Zona 7: Rússia e Cazaquistão
    "7": ("RU", "Rússia"),
    "76": ("KZ", "Cazaquistão"),
    "77": ("KZ", "Cazaquistão"),
    # Zona 8: Leste Asiático
    "81": ("JP", "Japão"),
    "82": ("KR", "Coreia do Sul"),
    "84": ("VN", "Vietnã"),
    "852": ("HK", "Hong Kong"),
    "86": ("CN", "China"),
    # Zona 9: Oriente Médio e Ásia Central
    "90": ("TR", "Turquia"),
    "91": ("IN", "Índia"),
    "92": ("PK", "Paquistão"),
    "93": ("AF", "Afeganistão"),
    "94": ("LK", "Sri Lanka"),
    "95": ("MM", "Mianmar"),
    "98": ("IR", "Irã"),
    "971": ("AE", "Emirados Árabes Unidos"),
    "972": ("IL", "Israel"),
    "966": ("SA", "Arábia Saudita"),
    "992": ("TJ", "Tajiquistão"),
    "993": ("TM", "Turcomenistão"),
    "994": ("AZ", "Azerbaijão"),
    "995": ("GE", "Geórgia"),
    "996": ("KG", "Quirguistão"),
    "998": ("UZ", "Uzbequistão"),
})

# Maior prefixo da tabela; limita a busca
MAX_PREFIX_LENGTH = max(len(prefix) for prefix in DIAL_CODES)
