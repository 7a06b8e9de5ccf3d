"""
Geração de identificadores dos registros (cli-..., cor-..., neg-..., par-...)
"""
import uuid


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def id_factory(prefix: str):
    """Default de coluna que gera ids com prefixo"""
    return lambda: generate_id(prefix)


def generate_share_id() -> str:
    return str(uuid.uuid4())
