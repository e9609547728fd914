"""Relay de webhooks do GitHub (evento watch/star) -> Telegram.

Este pacote contém:
- constants: nomes de headers, defaults e template da mensagem
- config: ServerConfig carregado de variáveis de ambiente e flags
- logs: configuração do structlog sobre o logging padrão
- utils: helpers pequenos
- tracing: middleware de X-Request-Id
- access_log: middleware de log estruturado por request
- webhook: validação de assinatura e decodificação dos eventos
- formatters: montagem da mensagem de notificação
- services: cliente da Bot API do Telegram
- controller: criação do Flask app e endpoints
- server: servidor HTTP e ponto de entrada
"""

__version__ = "0.1.0"
