"""Pacote do proxy de notificações InfluxDB -> Telegram.

Este pacote contém:
- constants: variáveis de ambiente opcionais e valores fixos
- config: carregamento das configurações obrigatórias (token e chat)
- notification: entidade Notification
- parser: decodificação e validação do payload recebido
- formatters: escape MarkdownV2 e montagem do texto da mensagem
- cancellation: sinal de cancelamento/deadline por requisição
- telegram: cliente de entrega para a Bot API do Telegram
- controller: criação do Flask app e endpoints
"""
