class RecordStoreError(Exception):
    """Base de todos os erros do store em memória."""


class RecordNotFoundError(RecordStoreError):
    """O id pedido não existe na coleção alvo."""

    def __init__(self, entity: str, record_id: int, message: str | None = None) -> None:
        self.entity = entity
        self.record_id = record_id
        self.message = message or f"{entity} {record_id} não encontrado"
        super().__init__(self.message)


class RecordValidationError(RecordStoreError):
    """Referência inválida na criação de consulta, ou status desconhecido."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)
