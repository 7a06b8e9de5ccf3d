"""
S.G.C.I. - CEP Lookup
Consulta de endereço pelo CEP na API pública do ViaCEP
"""
import logging

import httpx

from sgci.core.config import settings
from sgci.core.exceptions import SgciError, CepNotFoundError, ExternalServiceError
from sgci.utils.formatting import only_digits, format_cep

logger = logging.getLogger(__name__)


def format_address(data: dict) -> str:
    """Logradouro, bairro, cidade - UF (partes vazias são omitidas)"""
    cidade_uf = f"{data.get('localidade')} - {data.get('uf')}" if data.get("localidade") else None
    parts = [data.get("logradouro"), data.get("bairro"), cidade_uf]
    return ", ".join(p for p in parts if p)


async def lookup_cep(cep: str) -> dict:
    digits = only_digits(cep)
    if len(digits) != 8:
        raise SgciError("CEP inválido")

    url = f"{settings.VIACEP_URL.rstrip('/')}/{digits}/json/"
    try:
        async with httpx.AsyncClient(timeout=settings.VIACEP_TIMEOUT) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Falha ao consultar CEP {digits}: {e}")
        raise ExternalServiceError("Não foi possível consultar o CEP no momento.") from e

    if data.get("erro"):
        raise CepNotFoundError("CEP não encontrado.")

    return {
        "cep": format_cep(digits),
        "logradouro": data.get("logradouro") or "",
        "complemento": data.get("complemento") or "",
        "bairro": data.get("bairro") or "",
        "cidade": data.get("localidade") or "",
        "uf": data.get("uf") or "",
        "endereco": format_address(data),
    }
