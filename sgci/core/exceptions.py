"""
S.G.C.I. - Domain Exceptions
Cada erro carrega o status HTTP com que deve ser respondido
"""
from typing import List, Optional


class SgciError(Exception):
    """Erro base do sistema"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SgciError):
    """Registro não encontrado"""
    status_code = 404


class DuplicateRecordError(SgciError):
    """Documento, CRECI ou e-mail já cadastrado"""
    status_code = 400


class InstallmentLimitError(SgciError):
    """Negociação já possui o máximo de parcelas"""
    status_code = 400


class VersionConflictError(SgciError):
    """Registro alterado por outra sessão desde a última leitura"""
    status_code = 409

    def __init__(self, message: str, current_version: Optional[int] = None):
        super().__init__(message)
        self.current_version = current_version


class ReceiptValidationError(SgciError):
    """Dados do recibo incompletos ou inválidos"""
    status_code = 400

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Dados do recibo inválidos")
        self.errors = list(errors)


class ReceiptLinkConflictError(SgciError):
    """Parcela já vinculada a outro recibo"""
    status_code = 409


class PixPayloadError(SgciError):
    """Dados insuficientes para montar o BR Code"""
    status_code = 400


class CepNotFoundError(SgciError):
    """CEP inexistente na base dos Correios"""
    status_code = 404


class ExternalServiceError(SgciError):
    """Falha em serviço externo"""
    status_code = 502
