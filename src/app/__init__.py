"""App — coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: caso de uso de submissão (pipeline completo)
- services/: regras de origem, anti-bot, validação, rate limit, composição e entrega
- domain/: submissão, contexto da request e taxonomia de erros
- infra/: implementações concretas de IO (HTTP, stores de contadores)
- protocols/: contratos/interfaces
- observability/: logs estruturados, correlation_id, métricas
- constants/: constantes da aplicação

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
