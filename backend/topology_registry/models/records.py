"""Input schemas for registry records.

These only describe which fields a new record must carry and their
primitive types. Records are stored as supplied, so unknown fields are
allowed and kept.
"""
from pydantic import BaseModel, ConfigDict, StrictStr, model_validator
from typing import Any, Dict, List, Literal, Optional, Union


class RecordCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    uuid: Optional[StrictStr] = None
    name: StrictStr


class ApplicationCreate(RecordCreate):
    owner_uuid: StrictStr
    params: Optional[Dict[str, Any]] = None


class ServiceCreate(RecordCreate):
    application_uuid: StrictStr
    image_uuid: StrictStr
    params: Optional[Dict[str, Any]] = None
    configs: Optional[List[StrictStr]] = None


class InstanceCreate(RecordCreate):
    service_uuid: StrictStr
    params: Optional[Dict[str, Any]] = None


class ManifestCreate(RecordCreate):
    """A configuration file template rendered into a service's zones."""
    type: Literal["json", "text"]
    path: StrictStr
    template: Union[Dict[str, Any], StrictStr]

    @model_validator(mode="after")
    def check_template_type(self):
        if self.type == "json" and not isinstance(self.template, dict):
            raise ValueError("template must be an object when type is json")
        return self
