# Headers HTTP
HEADER_REQUEST_ID = "X-Request-Id"
HEADER_REAL_IP = "X-Real-Ip"
HEADER_FORWARDED_FOR = "X-Forwarded-For"
HEADER_GITHUB_EVENT = "X-GitHub-Event"
HEADER_SIGNATURE_256 = "X-Hub-Signature-256"
HEADER_SIGNATURE_SHA1 = "X-Hub-Signature"

# Valor usado nos logs quando hostname/request id não estão disponíveis
UNKNOWN = "unknown"

# Defaults de ambiente
DEFAULT_PORT = 8080
DEFAULT_LISTEN = "0.0.0.0"
DEFAULT_TELEGRAM_API_URL = "https://api.telegram.org"
DEFAULT_TELEGRAM_TIMEOUT_SECONDS = 10

# Timeout de leitura/escrita dos sockets do servidor (segundos)
SERVER_SOCKET_TIMEOUT_SECONDS = 15

# Respostas do endpoint /webhook
WEBHOOK_ACK_SENT = "OK"
WEBHOOK_ACK_GENERIC = "Event received. Have a nice day"
HEALTH_OK = "OK"

WATCH_MESSAGE_TEMPLATE = (
    "New Github star for *{name}* repo!. \n"
    "The *{name}* repo now has *{count}* stars! 🎉. \n"
    "Your new fan is {sender_url}"
)
