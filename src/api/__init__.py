"""API — camada de borda HTTP.

Responsabilidades:
- Receber a request do formulário e as checagens de health
- Normalizar headers em RequestContext
- Falar com APIs externas (Telegram)

Subpastas:
- connectors/: clientes HTTP de APIs externas
- normalizers/: conversão de request HTTP → modelos internos
- routes/: endpoints HTTP (submit, health)

NÃO PODE conter: FSM, regras de validação, orquestração de use cases.
"""
