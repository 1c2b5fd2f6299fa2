from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class ApiModel(BaseModel):
    # camelCase on the wire (teamAId, startDate), snake_case accepted on input too
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        # "   " counts as empty for the min_length checks
        str_strip_whitespace=True,
    )
