class StoreError(Exception):
    """Falha de transporte/armazenamento (rede, permissão, constraint)."""

    def __init__(self, message: str = "Erro de conexão com o banco."):
        super().__init__(message)
        self.message = message
