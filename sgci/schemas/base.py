"""
S.G.C.I. - Schema base
Os payloads trafegam em camelCase (recebidoDe, cpfCnpj, ...), os atributos em snake_case
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
