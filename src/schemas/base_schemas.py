from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# JSON em camelCase (acceptedCards, createdAt...), atributos Python em snake_case
class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
